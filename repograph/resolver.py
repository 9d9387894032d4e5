"""Resolution of relative import specifiers against the fetched file set."""

from __future__ import annotations

import posixpath
import re
from typing import AbstractSet, Optional

# Order matters: an exact match beats any extension, extensions beat index files.
RESOLUTION_SUFFIXES = (
    "",
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".json",
    "/index.js",
    "/index.jsx",
    "/index.ts",
    "/index.tsx",
)

_NETWORK_REFERENCE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.\-]*:|//)")


def is_network_reference(specifier: str) -> bool:
    """Return True for URLs such as ``https://cdn/x.js`` or ``//cdn/x.js``."""
    return bool(_NETWORK_REFERENCE.match(specifier))


def resolve_import_path(
    current_path: str, specifier: str, known_paths: AbstractSet[str]
) -> Optional[str]:
    """Return the known path ``specifier`` points at from ``current_path``, if any."""
    if not specifier or is_network_reference(specifier):
        return None

    directory = posixpath.dirname(current_path) or "."
    base = posixpath.normpath(f"{directory}/{specifier}")

    for suffix in RESOLUTION_SUFFIXES:
        candidate = base + suffix
        if candidate in known_paths:
            return candidate
    return None


__all__ = ["RESOLUTION_SUFFIXES", "is_network_reference", "resolve_import_path"]
