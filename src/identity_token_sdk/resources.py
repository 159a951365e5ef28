"""Loading of JSON claim maps from files and package resources."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

from .errors import ClaimsResourceError

PACKAGE_SEPARATOR = ":"


def read_resource(resource: str | Path) -> str:
    """Read a text resource.

    ``resource`` is either a filesystem path or ``"<package>:<name>"`` naming
    a file shipped inside an importable package.

    Raises:
        ClaimsResourceError: If the resource cannot be read.
    """
    try:
        if isinstance(resource, str) and PACKAGE_SEPARATOR in resource and not Path(resource).exists():
            package, _, name = resource.partition(PACKAGE_SEPARATOR)
            return resources.files(package).joinpath(name).read_text(encoding="utf-8")
        return Path(resource).read_text(encoding="utf-8")
    except (OSError, ModuleNotFoundError, UnicodeDecodeError) as e:
        raise ClaimsResourceError(
            f"Error reading resource file {resource}: {e}", resource=str(resource)
        ) from e


def load_claims(resource: str | Path) -> dict[str, Any]:
    """Read a JSON object of claims from ``resource``.

    Raises:
        ClaimsResourceError: If the resource is unreadable or not a JSON object.
    """
    content = read_resource(resource)
    try:
        claims = json.loads(content)
    except json.JSONDecodeError as e:
        raise ClaimsResourceError(
            f"Resource {resource} does not contain valid JSON: {e}", resource=str(resource)
        ) from e
    if not isinstance(claims, dict):
        raise ClaimsResourceError(
            f"Resource {resource} must contain a JSON object", resource=str(resource)
        )
    return claims
