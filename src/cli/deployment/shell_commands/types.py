"""Data types for shell command results."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["CommandResult"]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single external command invocation.

    Attributes:
        success: Whether the command exited with status 0
        returncode: Exit status of the process (127 if it could not start)
        error: OS error text when the program could not be started
    """

    success: bool
    returncode: int = 0
    error: str = ""

    def describe(self) -> str:
        """Return a short human-readable description of a failure."""
        if self.error:
            return self.error
        return f"exit status {self.returncode}"
