"""Reference extraction for HTML markup."""

from __future__ import annotations

import re
from typing import List

_LINK_HREF = re.compile(r"""<link.*?href=["'](.*?)["']""")
_SCRIPT_SRC = re.compile(r"""<script.*?src=["'](.*?)["']""")


def extract_markup_references(path: str, text: str) -> List[str]:
    """Return ``<link href>`` values followed by ``<script src>`` values.

    A pattern scan rather than a parse, so malformed markup still yields
    whatever references can be recognised.
    """
    references = [match.group(1) for match in _LINK_HREF.finditer(text)]
    references.extend(match.group(1) for match in _SCRIPT_SRC.finditer(text))
    return references


__all__ = ["extract_markup_references"]
