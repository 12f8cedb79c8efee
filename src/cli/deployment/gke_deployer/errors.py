"""Deployment error hierarchy.

Every fatal condition in a deployment run is a DeploymentError. The CLI
prints the message (and details, if any) and exits with status 1.
"""

from __future__ import annotations


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class MissingParameterError(DeploymentError):
    """A required configuration parameter is missing."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required param: {name}")


class MissingProjectError(MissingParameterError):
    """No project was given and none could be read from the token."""

    def __init__(self) -> None:
        super().__init__("project")
        self.details = (
            "Set the project explicitly, or use a service account key "
            "that contains a 'project_id' field."
        )


class InvalidVarsError(DeploymentError):
    """The template variables blob is not a JSON object."""


# ---------------------------------------------------------------------------
# Secrets and variables
# ---------------------------------------------------------------------------


class MalformedSecretError(DeploymentError):
    """A secret environment entry has no key/value separator."""


class EmptySecretValueError(DeploymentError):
    """A secret environment entry has an empty value."""


class DuplicateSecretError(DeploymentError):
    """Two secret environment entries derive the same name."""


class VariableShadowsBuiltinError(DeploymentError):
    """A user variable reuses the name of a built-in variable."""


class SecretShadowsVariableError(DeploymentError):
    """A secret reuses the name of a built-in or user variable."""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TemplateNotFoundError(DeploymentError):
    """A required template file does not exist."""


class TemplateRenderError(DeploymentError):
    """A template could not be parsed or rendered."""


class UndefinedVariableError(TemplateRenderError):
    """A template references a variable that is not defined."""


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


class CommandFailedError(DeploymentError):
    """An external command stage exited unsuccessfully."""

    def __init__(self, stage: str, reason: str):
        self.stage = stage
        self.reason = reason
        super().__init__(f"{stage} failed: {reason}")
