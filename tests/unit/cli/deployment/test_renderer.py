"""Unit tests for manifest template rendering."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from src.cli.deployment.gke_deployer.config import BuildContext
from src.cli.deployment.gke_deployer.constants import DeploymentPaths
from src.cli.deployment.gke_deployer.errors import (
    TemplateNotFoundError,
    TemplateRenderError,
    UndefinedVariableError,
)
from src.cli.deployment.gke_deployer.renderer import (
    TemplateDescriptor,
    TemplateRenderer,
    default_descriptors,
)
from src.cli.deployment.gke_deployer.variables import build_namespaces

DEPLOYMENT_TEMPLATE = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: {{ app }}
  labels:
    env: {{ env }}
spec:
  template:
    spec:
      containers:
        - name: {{ app }}
          image: {{ image }}
"""


@pytest.fixture
def renderer(paths: DeploymentPaths) -> TemplateRenderer:
    return TemplateRenderer(paths)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "repo"
    directory.mkdir()
    return directory


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(content)
    return path


class TestRender:
    """Tests for TemplateRenderer.render."""

    def test_substitutes_variables(
        self, renderer: TemplateRenderer, template_dir: Path, paths: DeploymentPaths
    ) -> None:
        template = _write(template_dir, ".kube.yml", DEPLOYMENT_TEMPLATE)

        output = renderer.render(
            TemplateDescriptor(template),
            {"app": "echo", "env": "dev", "image": "x:1.4"},
        )

        assert output == paths.transient_dir / ".kube.yml"
        content = output.read_text()
        assert "name: echo" in content
        assert "env: dev" in content
        assert "image: x:1.4" in content

    def test_rerender_is_identical(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(template_dir, ".kube.yml", DEPLOYMENT_TEMPLATE)
        variables = {"app": "echo", "env": "dev", "image": "x:1.4"}

        first = renderer.render(TemplateDescriptor(template), variables)
        assert first is not None
        first_content = first.read_text()
        second = renderer.render(TemplateDescriptor(template), variables)

        assert second is not None
        assert second.read_text() == first_content

    def test_undefined_variable_fails(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(template_dir, ".kube.yml", DEPLOYMENT_TEMPLATE)

        with pytest.raises(UndefinedVariableError) as exc_info:
            renderer.render(TemplateDescriptor(template), {"app": "echo", "env": "dev"})

        assert "image" in exc_info.value.message

    def test_undefined_variable_in_condition_fails(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(template_dir, ".kube.yml", "{% if debug %}debug: true{% endif %}\n")

        with pytest.raises(UndefinedVariableError):
            renderer.render(TemplateDescriptor(template), {})

    def test_conditionals_and_nested_values(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(
            template_dir,
            ".kube.yml",
            "image: {{ image.name }}:{{ image.tag }}\n"
            "{% if debug %}debug: true\n{% endif %}"
            "{% for port in ports %}- {{ port }}\n{% endfor %}",
        )

        output = renderer.render(
            TemplateDescriptor(template),
            {"image": {"name": "x", "tag": "1.4"}, "debug": False, "ports": [80, 443]},
        )

        assert output is not None
        assert output.read_text() == "image: x:1.4\n- 80\n- 443\n"

    def test_default_filter_covers_undefined(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(template_dir, ".kube.yml", "replicas: {{ replicas | default(1) }}\n")

        output = renderer.render(TemplateDescriptor(template), {})

        assert output is not None
        assert output.read_text() == "replicas: 1\n"

    def test_helpers_as_filters_and_globals(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(
            template_dir,
            ".kube.sec.yml",
            "a: {{ API_TOKEN | b64enc }}\nb: {{ b64enc(API_TOKEN) }}\n",
        )

        output = renderer.render(TemplateDescriptor(template), {"API_TOKEN": "123"})

        assert output is not None
        assert output.read_text() == "a: MTIz\nb: MTIz\n"

    def test_required_helper_fails_render(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(
            template_dir, ".kube.yml", "image: {{ image | required('image is required') }}\n"
        )

        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render(TemplateDescriptor(template), {"image": ""})

        assert "image is required" in exc_info.value.message

    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ("{{ x | b64dec }}", "Incorrect padding"),
            ("{{ trunc(x, 'a') }}", "TypeError"),
            ("{{ 1 / 0 }}", "ZeroDivisionError"),
        ],
    )
    def test_expression_errors_fail_render(
        self, renderer: TemplateRenderer, template_dir: Path, body: str, expected: str
    ) -> None:
        template = _write(template_dir, ".kube.yml", f"value: {body}\n")

        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render(TemplateDescriptor(template), {"x": "abc"})

        assert expected in exc_info.value.message

    def test_secret_template_errors_omit_error_text(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(template_dir, ".kube.sec.yml", "token: {{ API_TOKEN | b64dec }}\n")

        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render(TemplateDescriptor(template, secret=True), {"API_TOKEN": "abc"})

        assert exc_info.value.message == f"Error rendering {template}: Error"

    def test_syntax_error(self, renderer: TemplateRenderer, template_dir: Path) -> None:
        template = _write(template_dir, ".kube.yml", "name: {{ app \n")

        with pytest.raises(TemplateRenderError):
            renderer.render(TemplateDescriptor(template), {"app": "echo"})

    def test_output_is_owner_only(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        template = _write(template_dir, ".kube.sec.yml", "token: {{ t }}\n")

        output = renderer.render(TemplateDescriptor(template, secret=True), {"t": "x"})

        assert output is not None
        assert stat.S_IMODE(output.stat().st_mode) == 0o600

    def test_missing_required_template(
        self, renderer: TemplateRenderer, template_dir: Path
    ) -> None:
        with pytest.raises(TemplateNotFoundError):
            renderer.render(TemplateDescriptor(template_dir / ".kube.yml"), {})

    def test_missing_optional_template_is_skipped(
        self, renderer: TemplateRenderer, template_dir: Path, paths: DeploymentPaths
    ) -> None:
        output = renderer.render(
            TemplateDescriptor(template_dir / ".kube.sec.yml", required=False), {}
        )

        assert output is None
        assert not (paths.transient_dir / ".kube.sec.yml").exists()


class TestRenderAll:
    """Tests for TemplateRenderer.render_all."""

    @pytest.fixture
    def context(self) -> BuildContext:
        return BuildContext(project="p", zone="z", cluster="c")

    def test_stable_order_and_namespaces(
        self,
        renderer: TemplateRenderer,
        template_dir: Path,
        paths: DeploymentPaths,
        context: BuildContext,
    ) -> None:
        kube = _write(template_dir, ".kube.yml", "project: {{ project }}\n")
        secret = _write(template_dir, ".kube.sec.yml", "token: {{ API_TOKEN }}\n")
        namespaces = build_namespaces(context, {}, {"API_TOKEN": "123"})

        manifests = renderer.render_all(default_descriptors(kube, secret), namespaces)

        assert manifests == [
            paths.transient_dir / ".kube.yml",
            paths.transient_dir / ".kube.sec.yml",
        ]
        assert manifests[1].read_text() == "token: 123\n"

    def test_resource_template_cannot_see_secrets(
        self, renderer: TemplateRenderer, template_dir: Path, context: BuildContext
    ) -> None:
        kube = _write(template_dir, ".kube.yml", "token: {{ API_TOKEN }}\n")
        namespaces = build_namespaces(context, {}, {"API_TOKEN": "123"})

        with pytest.raises(UndefinedVariableError):
            renderer.render_all(
                default_descriptors(kube, template_dir / ".kube.sec.yml"), namespaces
            )

    def test_missing_secret_template_leaves_resource_only(
        self,
        renderer: TemplateRenderer,
        template_dir: Path,
        paths: DeploymentPaths,
        context: BuildContext,
    ) -> None:
        kube = _write(template_dir, ".kube.yml", "project: {{ project }}\n")
        namespaces = build_namespaces(context, {}, {"API_TOKEN": "123"})

        manifests = renderer.render_all(
            default_descriptors(kube, template_dir / ".kube.sec.yml"), namespaces
        )

        assert manifests == [paths.transient_dir / ".kube.yml"]

    def test_duplicate_file_names_fail(
        self, renderer: TemplateRenderer, template_dir: Path, context: BuildContext
    ) -> None:
        other = template_dir / "other"
        other.mkdir()
        kube = _write(template_dir, "app.yml", "a: 1\n")
        secret = _write(other, "app.yml", "b: 2\n")

        with pytest.raises(TemplateRenderError):
            renderer.render_all(
                default_descriptors(kube, secret), build_namespaces(context, {}, {})
            )
