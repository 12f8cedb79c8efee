"""GKE deployer.

This module provides the GkeDeployer class which runs one deployment:
it checks its inputs, builds the template variables, renders the manifests,
authenticates against the cluster and applies the manifests with kubectl.

Every step is fatal on failure. Nothing that was already applied is rolled
back; ``kubectl apply`` is declarative, so the next run simply re-applies.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from loguru import logger

from src.cli.shared.console import CLIConsole

from ..shell_commands import CommandResult, ShellCommands, context_name
from .config import DeployConfig, project_from_token
from .constants import DeploymentConstants, DeploymentPaths
from .errors import (
    CommandFailedError,
    DeploymentError,
    MissingParameterError,
    MissingProjectError,
)
from .renderer import TemplateRenderer, default_descriptors
from .secrets import SecretCollection, collect_secrets, environ_entries
from .variables import VariableNamespaces, build_namespaces

CommandsFactory = Callable[[Mapping[str, str]], ShellCommands]


class GkeDeployer:
    """Deployer for a GKE cluster using gcloud and kubectl.

    The deployment workflow consists of:
    1. Validate required inputs and resolve the project
    2. Collect secrets and build the public/secret variable namespaces
    3. Render the resource and secret templates
    4. Activate the service account and fetch cluster credentials
    5. Report the kubectl version
    6. Scope kubectl to the namespace and make sure it exists
    7. Validate the manifests with a dry-run apply
    8. Apply the manifests

    Steps 1-3 run before any external command, so configuration, variable
    and template mistakes never reach the cluster.

    Attributes:
        config: Validated deployment inputs
        paths: Transient file locations
        renderer: Template renderer
    """

    def __init__(
        self,
        console: CLIConsole,
        config: DeployConfig,
        environ: Mapping[str, str],
        paths: DeploymentPaths | None = None,
        commands_factory: CommandsFactory | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the GKE deployer.

        Args:
            console: CLI console for output
            config: Validated deployment inputs
            environ: Environment snapshot; secrets are read from it and the
                remainder is handed to child processes
            paths: Transient file locations (default: /tmp)
            commands_factory: Builds the shell commands for an environment
            constants: Optional deployment constants
        """
        self.console = console
        self.config = config
        self.environ = dict(environ)
        self.paths = paths or DeploymentPaths()
        self.constants = constants or DeploymentConstants()
        self.renderer = TemplateRenderer(self.paths)
        self._commands_factory: CommandsFactory = commands_factory or ShellCommands

    # =========================================================================
    # Public Interface
    # =========================================================================

    def deploy(self) -> None:
        """Run the full deployment.

        Raises:
            DeploymentError: On the first failing step
        """
        project = self._resolve_project()

        collection = collect_secrets(
            environ_entries(self.environ), prefix=self.constants.SECRET_PREFIX
        )
        namespaces = build_namespaces(
            self.config.build_context(project),
            self.config.vars,
            collection.secrets,
        )
        if self.config.verbose:
            self._dump_variables(namespaces)

        manifests = self.renderer.render_all(
            default_descriptors(self.config.kube_template, self.config.secret_template),
            namespaces,
        )
        if self.config.verbose:
            self._dump_manifest(manifests[0])

        key_file = self._write_key_file()
        try:
            commands = self._create_commands(collection, key_file)
            self._authenticate(commands, project, key_file)

            self._check("kubectl version", commands.kubectl.version())

            if self.config.namespace:
                self._ensure_namespace(commands, project)

            self._apply_manifests(commands, manifests)
        finally:
            self._remove_key_file(key_file)

        if self.config.dry_run:
            self.console.ok("Dry run complete, nothing was applied")
        else:
            self.console.ok("Kubernetes manifests applied")

    # =========================================================================
    # Validation
    # =========================================================================

    def _resolve_project(self) -> str:
        """Check required inputs and return the project to deploy to.

        Raises:
            MissingParameterError: If the token, zone or cluster is missing
            MissingProjectError: If no project is given or found in the token
        """
        if not self.config.token:
            raise MissingParameterError("token")

        project = self.config.project or project_from_token(self.config.token)
        if not project:
            raise MissingProjectError()

        if not self.config.zone:
            raise MissingParameterError("zone")
        if not self.config.cluster:
            raise MissingParameterError("cluster")

        return project

    # =========================================================================
    # Credentials
    # =========================================================================

    def _write_key_file(self) -> Path:
        """Write the service account key, readable by the owner only."""
        key_file = self.paths.key_file
        try:
            key_file.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(key_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(self.config.token)
            key_file.chmod(0o600)
        except OSError as e:
            raise DeploymentError(f"Error writing token file: {e}") from e
        return key_file

    def _remove_key_file(self, key_file: Path) -> None:
        # The run happens in a disposable container, so a leftover file is tolerable
        try:
            key_file.unlink()
        except OSError as e:
            logger.warning(f"Error removing token file: {e}")

    def _create_commands(
        self, collection: SecretCollection, key_file: Path
    ) -> ShellCommands:
        env = dict(collection.environ)
        env[self.constants.CREDENTIALS_ENV_VAR] = str(key_file)
        return self._commands_factory(env)

    def _authenticate(self, commands: ShellCommands, project: str, key_file: Path) -> None:
        self.console.info("Activating service account")
        self._check(
            "gcloud auth activate-service-account",
            commands.gcloud.activate_service_account(key_file),
        )

        self.console.info(f"Fetching credentials for cluster {self.config.cluster}")
        self._check(
            "gcloud container clusters get-credentials",
            commands.gcloud.get_cluster_credentials(
                self.config.cluster, project, self.config.zone
            ),
        )

    # =========================================================================
    # Kubernetes
    # =========================================================================

    def _ensure_namespace(self, commands: ShellCommands, project: str) -> None:
        """Scope kubectl to the namespace and create it if it does not exist."""
        namespace = self.config.namespace

        self.console.info(f"Configuring kubectl to the {namespace} namespace")
        context = context_name(project, self.config.zone, self.config.cluster)
        self._check(
            "kubectl config set-context",
            commands.kubectl.set_context_namespace(context, namespace),
        )

        manifest = self._write_namespace_manifest(namespace)

        # Unlike `kubectl create namespace`, apply succeeds when it already exists
        self.console.info(f"Ensuring the {namespace} namespace exists")
        self._check(
            "kubectl apply (namespace)",
            commands.kubectl.apply([manifest], dry_run=self.config.dry_run),
        )

    def _write_namespace_manifest(self, namespace: str) -> Path:
        resource = {
            "apiVersion": "v1",
            "kind": "Namespace",
            "metadata": {"name": namespace},
        }
        manifest = self.paths.namespace_manifest
        try:
            manifest.parent.mkdir(parents=True, exist_ok=True)
            manifest.write_text(
                yaml.safe_dump(resource, explicit_start=True, sort_keys=False)
            )
            manifest.chmod(0o600)
        except OSError as e:
            raise DeploymentError(f"Error writing namespace resource file: {e}") from e
        return manifest

    def _apply_manifests(self, commands: ShellCommands, manifests: list[Path]) -> None:
        if not self.config.dry_run:
            self.console.info("Validating Kubernetes manifests with a dry-run")
            self._check(
                "kubectl apply --dry-run",
                commands.kubectl.apply(manifests, dry_run=True),
            )
            self.console.info("Applying Kubernetes manifests to the cluster")
        else:
            self.console.info("Applying Kubernetes manifests with a dry-run")

        self._check(
            "kubectl apply",
            commands.kubectl.apply(manifests, dry_run=self.config.dry_run),
        )

    # =========================================================================
    # Private Helpers
    # =========================================================================

    def _check(self, stage: str, result: CommandResult) -> None:
        """Abort the deployment if a stage failed."""
        if not result.success:
            raise CommandFailedError(stage, result.describe())
        logger.debug(f"{stage} succeeded")

    def _dump_variables(self, namespaces: VariableNamespaces) -> None:
        # Only the public namespace is ever shown
        self.console.dump_json("VARIABLES AVAILABLE FOR TEMPLATES", namespaces.public)

    def _dump_manifest(self, manifest: Path) -> None:
        self.console.dump_yaml(
            "RENDERED MANIFEST (Secret Manifest Omitted)", manifest.read_text()
        )
