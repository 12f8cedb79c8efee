"""Deployment constants and configuration.

This module centralizes all magic strings, paths, and default values
used throughout the deployment process.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for GKE deployment.

    All attributes are class-level and immutable.
    """

    # Environment entries carrying secrets for the secret template
    SECRET_PREFIX: str = "SECRET_"

    # Default template file names, relative to the working directory
    DEFAULT_KUBE_TEMPLATE: str = ".kube.yml"
    DEFAULT_SECRET_TEMPLATE: str = ".kube.sec.yml"

    # Transient file names
    KEY_FILE_NAME: str = "gcloud.json"
    NAMESPACE_FILE_NAME: str = "namespace.yaml"

    # Variable pointing the Google SDKs at the key file
    CREDENTIALS_ENV_VAR: str = "GOOGLE_APPLICATION_CREDENTIALS"

    # Token field holding the owning project
    TOKEN_PROJECT_FIELD: str = "project_id"

    DEFAULT_TRANSIENT_DIR: str = "/tmp"


class DeploymentPaths:
    """Path resolver for the transient files of a deployment run.

    The run is assumed to execute in a disposable container, so everything
    is written to one flat transient directory.
    """

    def __init__(self, transient_dir: Path | None = None) -> None:
        """Initialize deployment paths.

        Args:
            transient_dir: Directory for generated files (default: /tmp)
        """
        self._constants = DeploymentConstants()
        self.transient_dir = transient_dir or Path(self._constants.DEFAULT_TRANSIENT_DIR)

    @property
    def key_file(self) -> Path:
        """Get path to the service account key file."""
        return self.transient_dir / self._constants.KEY_FILE_NAME

    @property
    def namespace_manifest(self) -> Path:
        """Get path to the generated Namespace manifest."""
        return self.transient_dir / self._constants.NAMESPACE_FILE_NAME

    def rendered_manifest(self, template: Path) -> Path:
        """Get the output path for a rendered template."""
        return self.transient_dir / template.name
