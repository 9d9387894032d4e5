"""Reference extractors keyed by file extension."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .markup import extract_markup_references
from .module import extract_module_references
from .stylesheet import extract_stylesheet_references

Extractor = Callable[[str, str], List[str]]

_EXTRACTORS_BY_SUFFIX: Dict[str, Extractor] = {
    ".html": extract_markup_references,
    ".css": extract_stylesheet_references,
    ".js": extract_module_references,
    ".jsx": extract_module_references,
    ".ts": extract_module_references,
    ".tsx": extract_module_references,
}


def extractor_for(path: str) -> Optional[Extractor]:
    """Return the extractor for ``path`` or None when the file has no references."""
    for suffix, extractor in _EXTRACTORS_BY_SUFFIX.items():
        if path.endswith(suffix):
            return extractor
    return None


def extract_references(path: str, text: str) -> List[str]:
    extractor = extractor_for(path)
    if extractor is None:
        return []
    return extractor(path, text)


__all__ = [
    "Extractor",
    "extract_markup_references",
    "extract_module_references",
    "extract_references",
    "extract_stylesheet_references",
    "extractor_for",
]
