"""Secret collection from the process environment.

Secrets are passed to the deployment as ``SECRET_<NAME>=<value>``
environment entries. They are made available to the secret template only,
and are stripped from the environment handed to child processes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from loguru import logger

from .constants import DeploymentConstants
from .errors import DuplicateSecretError, EmptySecretValueError, MalformedSecretError


@dataclass(frozen=True)
class SecretCollection:
    """Secrets extracted from an environment snapshot.

    Attributes:
        secrets: Secret name (prefix stripped) to value
        environ: The remaining, secret-free environment
    """

    secrets: dict[str, str] = field(default_factory=dict)
    environ: dict[str, str] = field(default_factory=dict)


def environ_entries(environ: Mapping[str, str]) -> list[str]:
    """Flatten an environment mapping into ``NAME=value`` entries."""
    return [f"{name}={value}" for name, value in environ.items()]


def collect_secrets(
    entries: Iterable[str],
    prefix: str = DeploymentConstants.SECRET_PREFIX,
) -> SecretCollection:
    """Extract secret entries from raw environment entries.

    Args:
        entries: ``NAME=value`` strings, as produced by environ_entries
        prefix: Name prefix marking an entry as a secret

    Returns:
        SecretCollection with the secrets and the scrubbed environment

    Raises:
        MalformedSecretError: If a secret entry has no '=' separator or no name
        EmptySecretValueError: If a secret entry has an empty value
        DuplicateSecretError: If two entries derive the same secret name
    """
    secrets: dict[str, str] = {}
    environ: dict[str, str] = {}

    for entry in entries:
        if not entry.startswith(prefix):
            name, _, value = entry.partition("=")
            environ[name] = value
            continue

        # Values may themselves contain '='
        name, sep, value = entry.partition("=")
        if not sep:
            raise MalformedSecretError(
                f"Error: secret var {entry!r} has no value",
                details="Secret entries must have the form SECRET_<NAME>=<value>.",
            )

        key = name[len(prefix) :]
        if not key:
            raise MalformedSecretError(
                f"Error: secret var {name!r} has no name after the {prefix!r} prefix",
                details="Secret entries must have the form SECRET_<NAME>=<value>.",
            )
        if key in secrets:
            raise DuplicateSecretError(f"Error: secret var {name!r} shadows existing secret")
        if value == "":
            raise EmptySecretValueError(f"Error: secret var {name!r} is an empty string")

        secrets[key] = value

    logger.debug(f"Collected secrets: {sorted(secrets)}")  # Log keys only
    return SecretCollection(secrets=secrets, environ=environ)
