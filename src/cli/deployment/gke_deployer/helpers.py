"""Helper functions available to manifest templates.

Every helper is registered both as a Jinja2 filter and as a global, so
``{{ token | b64enc }}`` and ``{{ b64enc(token) }}`` are equivalent.
Jinja2's own filters (upper, lower, trim, default, indent, replace, ...)
remain available alongside these.
"""

from __future__ import annotations

import base64
import hashlib
import json
from collections.abc import Callable
from typing import Any

import yaml  # type: ignore[import-untyped]
from jinja2 import Undefined
from jinja2.exceptions import TemplateRuntimeError


def b64enc(value: Any) -> str:
    """Base64-encode the string form of a value."""
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def b64dec(value: Any) -> str:
    """Decode a base64 string."""
    return base64.b64decode(str(value)).decode("utf-8")


def sha256sum(value: Any) -> str:
    """Hex SHA-256 digest of the string form of a value."""
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()


def quote(value: Any) -> str:
    """Wrap a value in double quotes, escaping as needed."""
    return json.dumps(str(value))


def squote(value: Any) -> str:
    """Wrap a value in single quotes."""
    return f"'{value}'"


def to_json(value: Any) -> str:
    """Serialize a value as compact JSON."""
    return json.dumps(value)


def to_yaml(value: Any) -> str:
    """Serialize a value as block-style YAML without a trailing newline."""
    dumped: str = yaml.safe_dump(value, default_flow_style=False, sort_keys=False)
    # Scalars are emitted with an explicit document end marker
    if dumped.endswith("\n...\n"):
        dumped = dumped[: -len("\n...\n")]
    return dumped.rstrip("\n")


def nindent(value: Any, width: int) -> str:
    """Indent every line of a value and prefix the result with a newline."""
    pad = " " * width
    return "\n" + "\n".join(pad + line for line in str(value).splitlines())


def trunc(value: Any, length: int) -> str:
    """Truncate a string; a negative length keeps the tail instead."""
    text = str(value)
    if length < 0:
        return text[length:]
    return text[:length]


def required(value: Any, message: str = "a required value is missing") -> Any:
    """Fail the render when a value is undefined, None or empty."""
    if isinstance(value, Undefined) or value is None or value == "":
        raise TemplateRuntimeError(message)
    return value


TEMPLATE_HELPERS: dict[str, Callable[..., Any]] = {
    "b64enc": b64enc,
    "b64dec": b64dec,
    "sha256sum": sha256sum,
    "quote": quote,
    "squote": squote,
    "to_json": to_json,
    "to_yaml": to_yaml,
    "nindent": nindent,
    "trunc": trunc,
    "required": required,
}
