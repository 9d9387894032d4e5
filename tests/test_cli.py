"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repograph import cli
from repograph.cli import _build_parser
from repograph.errors import InvalidRepoUrlError
from repograph.models import GraphEdge, GraphNode, GraphResult


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--verbose", "analyze", "https://github.com/o/r"]).verbose is True
    args = parser.parse_args(["analyze", "https://github.com/o/r", "--verbose"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.url == "https://github.com/o/r"


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve"])
    assert args.host == "0.0.0.0"
    assert args.port == 3001


def test_analyze_writes_json_output(monkeypatch, tmp_path: Path) -> None:
    result = GraphResult(
        nodes=[GraphNode(id="a.js", display_name="a.js", byte_size=0, content="", color="hsl(0, 70%, 50%)")],
        edges=[GraphEdge(source="a.js", target="a.js")],
        tree=[],
    )
    calls = []

    def fake_analyze(url, config):
        calls.append((url, config.github.token))
        return result

    monkeypatch.setattr(cli, "analyze_repository", fake_analyze)
    output = tmp_path / "graph.json"

    cli.main(["analyze", "https://github.com/o/r", "--config", str(tmp_path), "-o", str(output)])

    assert calls == [("https://github.com/o/r", None)]
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["links"] == [{"source": "a.js", "target": "a.js"}]


def test_analyze_reports_failures(monkeypatch, tmp_path: Path, capsys) -> None:
    def fake_analyze(url, config):
        raise InvalidRepoUrlError()

    monkeypatch.setattr(cli, "analyze_repository", fake_analyze)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", "nope", "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "Invalid GitHub URL format." in capsys.readouterr().err


def test_summarize_without_key_exits(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    source = tmp_path / "app.js"
    source.write_text("console.log(1);\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["summarize", str(source), "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "AI API key is not configured" in capsys.readouterr().err


def test_log_file_option_reaches_logging_setup(monkeypatch, tmp_path: Path) -> None:
    seen = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: seen.append(kwargs))
    monkeypatch.setattr(cli, "analyze_repository", lambda url, config: GraphResult([], [], []))
    log_file = tmp_path / "logs" / "run.log"

    cli.main(["analyze", "https://github.com/o/r", "--log-file", str(log_file), "--config", str(tmp_path)])

    assert seen == [{"verbose": False, "log_file": log_file}]


def test_log_file_defaults_to_none() -> None:
    parser = _build_parser()
    assert parser.parse_args(["serve"]).log_file is None
    assert parser.parse_args(["--log-file", "a.log", "serve"]).log_file == Path("a.log")
