"""Deployment module for applying Kubernetes manifests to GKE.

The package is organized into subpackages for modularity:
- shell_commands: Abstractions for gcloud and kubectl execution
- gke_deployer: Template rendering and the deployment sequence
"""

from .gke_deployer import DeployConfig, DeploymentError, GkeDeployer

__version__ = "1.0.0"

__all__ = ["GkeDeployer", "DeployConfig", "DeploymentError", "__version__"]
