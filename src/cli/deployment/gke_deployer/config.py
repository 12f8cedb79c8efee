"""Deployment configuration models.

DeployConfig holds the validated inputs of one run; BuildContext is the
immutable record of build metadata and target identifiers exposed to
templates as built-in variables.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

from .constants import DeploymentConstants
from .errors import InvalidVarsError

_CONSTANTS = DeploymentConstants()


class BuildContext(BaseModel):
    """Build metadata and cluster target identifiers."""

    model_config = ConfigDict(frozen=True)

    build_number: str = ""
    commit: str = ""
    branch: str = ""
    tag: str = ""
    project: str
    zone: str
    cluster: str
    namespace: str = ""

    def as_variables(self) -> dict[str, JsonValue]:
        """Return the built-in template variables.

        Build metadata uses upper-case keys; target identifiers are lower-case.
        """
        return {
            "BUILD_NUMBER": self.build_number,
            "COMMIT": self.commit,
            "BRANCH": self.branch,
            "TAG": self.tag,
            "project": self.project,
            "zone": self.zone,
            "cluster": self.cluster,
            "namespace": self.namespace,
        }


class DeployConfig(BaseModel):
    """Validated inputs for a deployment run.

    Required values are not enforced here: the deployer checks them in a
    fixed order so that the first missing one is the one reported.
    """

    model_config = ConfigDict(frozen=True)

    token: str = ""
    project: str = ""
    zone: str = ""
    cluster: str = ""
    namespace: str = ""
    kube_template: Path = Path(_CONSTANTS.DEFAULT_KUBE_TEMPLATE)
    secret_template: Path = Path(_CONSTANTS.DEFAULT_SECRET_TEMPLATE)
    vars: dict[str, JsonValue] = Field(default_factory=dict)
    dry_run: bool = False
    verbose: bool = False
    build_number: str = ""
    commit: str = ""
    branch: str = ""
    tag: str = ""

    @field_validator("token", mode="before")
    @classmethod
    def _strip_token(cls, value: Any) -> Any:
        # YAML block scalars in CI config often leave surrounding whitespace
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("project", "zone", "cluster", "namespace", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("kube_template", mode="before")
    @classmethod
    def _default_kube_template(cls, value: Any) -> Any:
        return _template_or_default(value, _CONSTANTS.DEFAULT_KUBE_TEMPLATE)

    @field_validator("secret_template", mode="before")
    @classmethod
    def _default_secret_template(cls, value: Any) -> Any:
        return _template_or_default(value, _CONSTANTS.DEFAULT_SECRET_TEMPLATE)

    @field_validator("vars", mode="before")
    @classmethod
    def _parse_vars(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return parse_vars(value)
        return value

    def build_context(self, project: str) -> BuildContext:
        """Create the BuildContext for a resolved project."""
        return BuildContext(
            build_number=self.build_number,
            commit=self.commit,
            branch=self.branch,
            tag=self.tag,
            project=project,
            zone=self.zone,
            cluster=self.cluster,
            namespace=self.namespace,
        )


def _template_or_default(value: Any, default: str) -> Any:
    # Path("") collapses to Path("."), so treat both as unset
    if value is None or str(value) in ("", "."):
        return default
    return value


def parse_vars(blob: str | None) -> dict[str, Any]:
    """Parse the user variables blob.

    Args:
        blob: JSON object text, or empty/None for no variables

    Returns:
        Mapping of variable name to JSON value

    Raises:
        InvalidVarsError: If the blob is not valid JSON or not an object
    """
    if not blob or not blob.strip():
        return {}

    try:
        parsed = json.loads(blob)
    except json.JSONDecodeError as e:
        raise InvalidVarsError(f"Error parsing vars: {e}") from e

    if not isinstance(parsed, dict):
        raise InvalidVarsError(
            "Error parsing vars: expected a JSON object",
            details=f"Got a JSON {type(parsed).__name__} instead.",
        )
    return parsed


def project_from_token(token: str) -> str:
    """Read the project identifier from a service account key.

    Returns an empty string when the token is not JSON or has no project.
    """
    try:
        data = json.loads(token)
    except json.JSONDecodeError:
        return ""
    if not isinstance(data, dict):
        return ""
    project = data.get(_CONSTANTS.TOKEN_PROJECT_FIELD)
    return project if isinstance(project, str) else ""
