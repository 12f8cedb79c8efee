"""Template variable namespaces.

Two namespaces are built for every run:

- public: built-in variables plus user variables. Safe to print.
- secret: the public namespace plus collected secrets. Never printed.

No name may come from more than one source, so the built-in variables can
always be relied upon by templates.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import JsonValue

from .config import BuildContext
from .errors import SecretShadowsVariableError, VariableShadowsBuiltinError


@dataclass(frozen=True)
class VariableNamespaces:
    """Rendering contexts for the resource and secret templates."""

    public: dict[str, JsonValue]
    secret: dict[str, JsonValue]


def build_namespaces(
    context: BuildContext,
    user_vars: Mapping[str, JsonValue],
    secrets: Mapping[str, str],
) -> VariableNamespaces:
    """Build the public and secret variable namespaces.

    Args:
        context: Build metadata and target identifiers
        user_vars: Variables supplied with the deployment
        secrets: Secrets collected from the environment

    Returns:
        VariableNamespaces with public a subset of secret

    Raises:
        VariableShadowsBuiltinError: If a user variable reuses a built-in name
        SecretShadowsVariableError: If a secret reuses any existing name
    """
    public: dict[str, JsonValue] = context.as_variables()

    for name, value in user_vars.items():
        if name in public:
            raise VariableShadowsBuiltinError(f"Error: var {name!r} shadows existing var")
        public[name] = value

    secret: dict[str, JsonValue] = dict(public)

    for name, secret_value in secrets.items():
        if name in secret:
            raise SecretShadowsVariableError(
                f"Error: secret var {name!r} shadows existing var"
            )
        secret[name] = secret_value

    return VariableNamespaces(public=public, secret=secret)
