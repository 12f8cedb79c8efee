"""Command runner for executing external programs.

This module provides the base command execution functionality used by
the gcloud and kubectl command modules.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult

# Exit status reported when the program itself could not be started
COMMAND_NOT_RUN = 127


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Commands run with an explicit environment and inherit the caller's
    stdout/stderr, so their output streams straight to the build log.
    Nothing is captured and nothing is retried; callers only see success
    or failure.
    """

    def __init__(
        self,
        env: Mapping[str, str],
        cwd: Path | None = None,
    ) -> None:
        """Initialize the command runner.

        Args:
            env: Complete environment handed to every child process
            cwd: Working directory for commands (defaults to the current one)
        """
        self.env = dict(env)
        self.cwd = cwd

    def run(self, cmd: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        """Execute a command and block until it exits.

        Args:
            cmd: Program and arguments as a sequence
            cwd: Working directory override for this command

        Returns:
            CommandResult with success status and return code
        """
        args = list(cmd)
        logger.debug(f"Running: {' '.join(args)}")

        try:
            result = subprocess.run(
                args,
                cwd=cwd or self.cwd,
                env=self.env,
                check=False,
            )
        except OSError as e:
            return CommandResult(success=False, returncode=COMMAND_NOT_RUN, error=str(e))

        return CommandResult(
            success=result.returncode == 0,
            returncode=result.returncode,
        )
