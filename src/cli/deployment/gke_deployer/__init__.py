"""GKE deployer package.

This package renders manifest templates and applies them to a GKE cluster,
with each concern separated into its own module:

- secrets: secret collection from the environment
- variables: public and secret template variable namespaces
- helpers: helper functions available to templates
- renderer: strict Jinja2 rendering of manifest templates
- config: validated deployment inputs
- errors: the DeploymentError hierarchy

The GkeDeployer class in deployer.py sequences these components into a
complete deployment.

Usage:
    from src.cli.deployment.gke_deployer import DeployConfig, GkeDeployer

    deployer = GkeDeployer(console, DeployConfig(...), os.environ)
    deployer.deploy()
"""

from .config import BuildContext, DeployConfig
from .constants import DeploymentConstants, DeploymentPaths
from .deployer import GkeDeployer
from .errors import DeploymentError
from .renderer import TemplateDescriptor, TemplateRenderer
from .secrets import SecretCollection, collect_secrets
from .variables import VariableNamespaces, build_namespaces

__all__ = [
    "GkeDeployer",
    "DeploymentError",
    # Component classes for testing/extension
    "BuildContext",
    "DeployConfig",
    "DeploymentConstants",
    "DeploymentPaths",
    "SecretCollection",
    "TemplateDescriptor",
    "TemplateRenderer",
    "VariableNamespaces",
    "build_namespaces",
    "collect_secrets",
]
