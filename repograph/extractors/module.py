"""Tree-sitter powered import extraction for JavaScript and TypeScript modules."""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from ..logging import get_logger

logger = get_logger("extractors.module")

# The TSX grammar covers JavaScript, JSX and TypeScript syntax alike; plain
# TypeScript keeps its own grammar so `<Type>value` assertions still parse.
_GRAMMAR_BY_SUFFIX = {
    ".js": "tsx",
    ".jsx": "tsx",
    ".tsx": "tsx",
    ".ts": "typescript",
}

_LANGUAGE_CACHE: Dict[str, Language] = {}
# Edge extraction runs on worker threads; parsers are not shared between them.
_PARSERS = threading.local()


class ModuleParseError(ValueError):
    """Raised when a module's text is not syntactically valid."""


def _get_language(grammar: str) -> Language:
    language = _LANGUAGE_CACHE.get(grammar)
    if language is None:
        if grammar == "typescript":
            language = Language(tree_sitter_typescript.language_typescript())
        elif grammar == "tsx":
            language = Language(tree_sitter_typescript.language_tsx())
        else:
            raise ValueError(f"unsupported grammar: {grammar}")
        _LANGUAGE_CACHE[grammar] = language
    return language


def _get_parser(grammar: str) -> Parser:
    cache: Optional[Dict[str, Parser]] = getattr(_PARSERS, "by_grammar", None)
    if cache is None:
        cache = _PARSERS.by_grammar = {}
    parser = cache.get(grammar)
    if parser is None:
        parser = Parser()
        parser.language = _get_language(grammar)
        cache[grammar] = parser
    return parser


def grammar_for_path(path: str) -> str:
    lower = path.lower()
    for suffix, grammar in _GRAMMAR_BY_SUFFIX.items():
        if lower.endswith(suffix):
            return grammar
    return "tsx"


def parse_import_specifiers(path: str, text: str) -> List[str]:
    """Return every static import declaration's module specifier.

    Raises ModuleParseError when the text contains a syntax error.
    """
    source_bytes = text.encode("utf-8")
    tree = _get_parser(grammar_for_path(path)).parse(source_bytes)
    root = tree.root_node
    if root.has_error:
        raise ModuleParseError(_describe_error(root))

    specifiers: List[str] = []
    for node in _iter_nodes(root):
        if node.type != "import_statement":
            continue
        # `import x = require("y")` carries no source field and is not a declaration.
        source = node.child_by_field_name("source")
        if source is None:
            continue
        specifiers.append(_string_value(source, source_bytes))
    return specifiers


def extract_module_references(path: str, text: str) -> List[str]:
    """Return import specifiers, or nothing when the module cannot be parsed."""
    try:
        return parse_import_specifiers(path, text)
    except ModuleParseError as exc:
        logger.warning("Could not parse %s: %s", path, exc)
        return []


def _iter_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if node.type == "import_statement":
            continue
        stack.extend(reversed(node.children))


def _string_value(node: Node, source_bytes: bytes) -> str:
    fragments = [
        source_bytes[child.start_byte : child.end_byte].decode("utf-8", errors="replace")
        for child in node.children
        if child.type in {"string_fragment", "escape_sequence"}
    ]
    if fragments:
        return "".join(fragments)
    raw = source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
    return raw[1:-1] if len(raw) >= 2 else ""


def _describe_error(root: Node) -> str:
    node = _first_error(root)
    if node is None:
        return "syntax error"
    row, column = node.start_point
    return f"syntax error at line {row + 1}, column {column + 1}"


def _first_error(root: Node) -> Optional[Node]:
    for node in _iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


__all__ = [
    "ModuleParseError",
    "extract_module_references",
    "grammar_for_path",
    "parse_import_specifiers",
]
