"""Manifest template rendering.

Templates are Jinja2 files rendered in strict mode: referencing a variable
that is not defined fails the deployment instead of producing an empty
value, so a typo in a template or variable name surfaces as a build
failure rather than a broken manifest.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from jinja2.exceptions import TemplateError, UndefinedError
from loguru import logger
from pydantic import JsonValue

from .constants import DeploymentPaths
from .errors import TemplateNotFoundError, TemplateRenderError, UndefinedVariableError
from .helpers import TEMPLATE_HELPERS
from .variables import VariableNamespaces


@dataclass(frozen=True)
class TemplateDescriptor:
    """A template file and how it is rendered.

    Attributes:
        path: Template file, relative to the working directory
        required: Whether a missing file fails the deployment
        secret: Whether to render against the secret namespace
    """

    path: Path
    required: bool = True
    secret: bool = False


def default_descriptors(kube_template: Path, secret_template: Path) -> list[TemplateDescriptor]:
    """Return the resource and secret template descriptors, in render order."""
    return [
        TemplateDescriptor(path=kube_template, required=True, secret=False),
        TemplateDescriptor(path=secret_template, required=False, secret=True),
    ]


class TemplateRenderer:
    """Renders manifest templates into the transient directory."""

    def __init__(self, paths: DeploymentPaths) -> None:
        """Initialize the renderer.

        Args:
            paths: Deployment path resolver
        """
        self.paths = paths

    def _environment(self, search_dir: Path) -> Environment:
        env = Environment(
            loader=FileSystemLoader(str(search_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        env.filters.update(TEMPLATE_HELPERS)
        env.globals.update(TEMPLATE_HELPERS)
        return env

    def render_text(
        self,
        template_path: Path,
        variables: dict[str, JsonValue],
        *,
        secret: bool = False,
    ) -> str:
        """Render a template file and return the result.

        Errors raised by helpers or expressions while rendering are reported
        as TemplateRenderError. For secret templates the message names only
        the error type, never its text.

        Raises:
            UndefinedVariableError: If the template references an unbound name
            TemplateRenderError: If the template cannot be parsed or rendered
        """
        env = self._environment(template_path.parent)
        try:
            template = env.get_template(template_path.name)
            return template.render(variables)
        except UndefinedError as e:
            raise UndefinedVariableError(
                f"Error rendering {template_path}: {e.message}",
                details="Check the variable name in the template, or pass it with --vars.",
            ) from e
        except TemplateError as e:
            raise TemplateRenderError(f"Error rendering {template_path}: {e}") from e
        except Exception as e:
            reason = type(e).__name__ if secret else f"{type(e).__name__}: {e}"
            raise TemplateRenderError(f"Error rendering {template_path}: {reason}") from e

    def render(
        self,
        descriptor: TemplateDescriptor,
        variables: dict[str, JsonValue],
    ) -> Path | None:
        """Render one template to its manifest file.

        Args:
            descriptor: Template to render
            variables: Namespace the template is rendered against

        Returns:
            Path of the rendered manifest, or None if an optional template
            does not exist

        Raises:
            TemplateNotFoundError: If a required template does not exist
        """
        if not descriptor.path.is_file():
            if descriptor.required:
                raise TemplateNotFoundError(
                    f"Error finding template: {descriptor.path}",
                    details=f"Expected a template at {descriptor.path.resolve()}",
                )
            logger.warning(
                f"Skipping optional template {descriptor.path} because it was not found"
            )
            return None

        content = self.render_text(descriptor.path, variables, secret=descriptor.secret)

        output = self.paths.rendered_manifest(descriptor.path)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(content)
            output.chmod(0o600)
        except OSError as e:
            raise TemplateRenderError(f"Error writing manifest {output}: {e}") from e

        logger.debug(f"Rendered {descriptor.path} -> {output}")
        return output

    def render_all(
        self,
        descriptors: Iterable[TemplateDescriptor],
        namespaces: VariableNamespaces,
    ) -> list[Path]:
        """Render every template, returning manifest paths in descriptor order.

        Raises:
            TemplateRenderError: If two templates would write the same manifest
        """
        manifests: list[Path] = []
        for descriptor in descriptors:
            if self.paths.rendered_manifest(descriptor.path) in manifests:
                raise TemplateRenderError(
                    f"Templates must have distinct file names: {descriptor.path.name}"
                )
            variables = namespaces.secret if descriptor.secret else namespaces.public
            output = self.render(descriptor, variables)
            if output is not None:
                manifests.append(output)
        return manifests
