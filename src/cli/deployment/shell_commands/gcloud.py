"""Gcloud command abstractions.

Authentication and cluster credential retrieval for GKE.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner

GCLOUD = "gcloud"


class GcloudCommands:
    """Gcloud-related shell commands.

    Provides operations for:
    - Activating a service account from a JSON key file
    - Fetching kubeconfig credentials for a GKE cluster
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize gcloud commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def activate_service_account(self, key_file: Path) -> CommandResult:
        """Activate a service account session using a JSON key file."""
        return self._runner.run(
            [GCLOUD, "auth", "activate-service-account", "--key-file", str(key_file)]
        )

    def get_cluster_credentials(
        self,
        cluster: str,
        project: str,
        zone: str,
    ) -> CommandResult:
        """Write kubeconfig credentials for a cluster.

        Args:
            cluster: GKE cluster name
            project: GCP project that owns the cluster
            zone: Zone of the cluster

        Returns:
            CommandResult of the gcloud invocation
        """
        return self._runner.run(
            [
                GCLOUD,
                "container",
                "clusters",
                "get-credentials",
                cluster,
                "--project",
                project,
                "--zone",
                zone,
            ]
        )
