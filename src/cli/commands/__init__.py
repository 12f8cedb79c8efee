"""CLI command modules.

Commands:
- deploy: Render manifest templates and apply them to a GKE cluster
"""

from .deploy import deploy

__all__ = ["deploy"]
