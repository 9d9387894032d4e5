"""Tests for CSS @import extraction."""

from __future__ import annotations

from repograph.extractors import extract_stylesheet_references


def test_url_and_bare_string_forms() -> None:
    css = """
    @import url("./base.css");
    @import "./theme.css";
    @import url('print.css') print;
    @import url(reset.css);
    @import 'fonts.css';
    body { color: red; }
    """
    assert extract_stylesheet_references("styles/main.css", css) == [
        "./base.css",
        "./theme.css",
        "print.css",
        "reset.css",
        "fonts.css",
    ]


def test_background_urls_are_not_imports() -> None:
    css = ".hero { background: url('hero.png'); }"
    assert extract_stylesheet_references("main.css", css) == []


def test_empty_import_is_skipped() -> None:
    assert extract_stylesheet_references("main.css", '@import "";') == []
