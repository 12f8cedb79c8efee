"""Shell command abstractions for GKE deployment operations.

This package wraps the two external tools a deployment drives:

- gcloud: service account activation and cluster credentials
- kubectl: version, context and manifest application

Every command returns a CommandResult; deciding whether a failure is
fatal is left to the caller.

Usage:
    from src.cli.deployment.shell_commands import ShellCommands

    commands = ShellCommands(env=os.environ)
    if not commands.kubectl.version().success:
        ...
"""

from collections.abc import Mapping
from pathlib import Path

from .gcloud import GcloudCommands
from .kubectl import KubectlCommands, apply_args, context_name
from .runner import CommandRunner
from .types import CommandResult


class ShellCommands:
    """Unified interface for the deployment's shell commands.

    Attributes:
        gcloud: Google Cloud SDK commands
        kubectl: Kubernetes kubectl commands
    """

    def __init__(self, env: Mapping[str, str], cwd: Path | None = None) -> None:
        """Initialize the shell commands executor.

        Args:
            env: Environment handed to every child process
            cwd: Working directory for commands (defaults to the current one)
        """
        runner = CommandRunner(env, cwd)

        self.gcloud = GcloudCommands(runner)
        self.kubectl = KubectlCommands(runner)


__all__ = [
    "ShellCommands",
    "CommandResult",
    "CommandRunner",
    "GcloudCommands",
    "KubectlCommands",
    "apply_args",
    "context_name",
]
