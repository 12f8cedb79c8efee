"""GKE deploy command.

Every option can also be set through the environment variable a CI
plugin runner exports for it (PLUGIN_*, TOKEN, DRONE_*).
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from src.cli.deployment import DeployConfig, GkeDeployer, __version__
from src.cli.shared.console import console, with_error_handling
from src.cli.shared.log_config import configure_logging


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gke-deploy {__version__}")
        raise typer.Exit()


@with_error_handling
def deploy(
    token: Annotated[
        str,
        typer.Option(
            "--token",
            envvar="TOKEN",
            help="Service account's JSON credentials",
            show_default=False,
        ),
    ] = "",
    project: Annotated[
        str,
        typer.Option(
            "--project",
            envvar="PLUGIN_PROJECT",
            help="GCP project name (default: read from the token)",
        ),
    ] = "",
    zone: Annotated[
        str,
        typer.Option(
            "--zone",
            envvar="PLUGIN_ZONE",
            help="Zone of the container cluster",
        ),
    ] = "",
    cluster: Annotated[
        str,
        typer.Option(
            "--cluster",
            envvar="PLUGIN_CLUSTER",
            help="Name of the container cluster",
        ),
    ] = "",
    namespace: Annotated[
        str,
        typer.Option(
            "--namespace",
            "-n",
            envvar="PLUGIN_NAMESPACE",
            help="Kubernetes namespace to operate in",
        ),
    ] = "",
    kube_template: Annotated[
        Path,
        typer.Option(
            "--kube-template",
            envvar="PLUGIN_TEMPLATE",
            help="Template for Kubernetes resources, e.g. deployments",
        ),
    ] = Path(".kube.yml"),
    secret_template: Annotated[
        Path,
        typer.Option(
            "--secret-template",
            envvar="PLUGIN_SECRET_TEMPLATE",
            help="Optional template for Kubernetes Secret resources",
        ),
    ] = Path(".kube.sec.yml"),
    vars_json: Annotated[
        str,
        typer.Option(
            "--vars",
            envvar="PLUGIN_VARS",
            help="Variables to use while templating manifests, as a JSON object",
        ),
    ] = "",
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            envvar="PLUGIN_DRY_RUN",
            help="Do not apply the Kubernetes manifests to the API server",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            envvar="PLUGIN_VERBOSE",
            help="Dump available vars and the generated manifest, keeping secrets hidden",
        ),
    ] = False,
    build_number: Annotated[
        str,
        typer.Option("--drone-build-number", envvar="DRONE_BUILD_NUMBER", help="Build number"),
    ] = "",
    commit: Annotated[
        str,
        typer.Option("--drone-commit", envvar="DRONE_COMMIT", help="Git commit hash"),
    ] = "",
    branch: Annotated[
        str,
        typer.Option("--drone-branch", envvar="DRONE_BRANCH", help="Git branch"),
    ] = "",
    tag: Annotated[
        str,
        typer.Option("--drone-tag", envvar="DRONE_TAG", help="Git tag"),
    ] = "",
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = False,
) -> None:
    """
    🚀 Render Kubernetes manifest templates and apply them to a GKE cluster.

    Environment entries named SECRET_<NAME> are available to the secret
    template as <NAME>, and are hidden from gcloud and kubectl.
    """
    configure_logging(verbose)
    console.print_banner(f"GKE Deploy {__version__}")

    config = DeployConfig(
        token=token,
        project=project,
        zone=zone,
        cluster=cluster,
        namespace=namespace,
        kube_template=kube_template,
        secret_template=secret_template,
        vars=vars_json,
        dry_run=dry_run,
        verbose=verbose,
        build_number=build_number,
        commit=commit,
        branch=branch,
        tag=tag,
    )

    deployer = GkeDeployer(console, config, os.environ)
    deployer.deploy()
