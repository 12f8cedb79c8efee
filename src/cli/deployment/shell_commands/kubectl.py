"""Kubectl command abstractions.

This module provides the kubectl operations used during a deployment:
version reporting, context configuration and manifest application.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner

KUBECTL = "kubectl"


def apply_args(dry_run: bool, filename: str) -> list[str]:
    """Build the argument list for ``kubectl apply``.

    Args:
        dry_run: Whether to validate only, without persisting changes
        filename: A single path or comma-joined list of paths

    Returns:
        Arguments following the program name
    """
    args = ["apply", "--record"]
    if dry_run:
        args.append("--dry-run")
    args.extend(["--filename", filename])
    return args


def context_name(project: str, zone: str, cluster: str) -> str:
    """Return the kubeconfig context name gcloud creates for a GKE cluster."""
    return "_".join(["gke", project, zone, cluster])


class KubectlCommands:
    """Kubectl-related shell commands.

    Provides operations for:
    - Client/server version reporting
    - Scoping the active context to a namespace
    - Applying manifests, optionally as a dry run
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    # =========================================================================
    # Cluster Context
    # =========================================================================

    def version(self) -> CommandResult:
        """Print the kubectl client and server versions."""
        return self._runner.run([KUBECTL, "version"])

    def set_context_namespace(self, context: str, namespace: str) -> CommandResult:
        """Make ``namespace`` the default namespace of ``context``."""
        return self._runner.run(
            [KUBECTL, "config", "set-context", context, "--namespace", namespace]
        )

    # =========================================================================
    # Manifest Application
    # =========================================================================

    def apply(self, manifests: Sequence[Path], *, dry_run: bool = False) -> CommandResult:
        """Apply one or more manifest files.

        Args:
            manifests: Manifest files, applied in a single invocation
            dry_run: Validate the manifests without persisting changes

        Returns:
            CommandResult of the kubectl invocation
        """
        filename = ",".join(str(m) for m in manifests)
        return self._runner.run([KUBECTL, *apply_args(dry_run, filename)])
