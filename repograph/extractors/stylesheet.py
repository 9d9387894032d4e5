"""Reference extraction for CSS stylesheets."""

from __future__ import annotations

import re
from typing import List

# Either url(...) with an optional matching quote, or a quoted bare string.
_IMPORT = re.compile(r"""@import\s+(?:url\((['"]?)(.*?)\1\)|(['"])(.*?)\3)""")


def extract_stylesheet_references(path: str, text: str) -> List[str]:
    """Return the target of every ``@import`` rule in document order."""
    references: List[str] = []
    for match in _IMPORT.finditer(text):
        target = match.group(2) or match.group(4)
        if target:
            references.append(target)
    return references


__all__ = ["extract_stylesheet_references"]
