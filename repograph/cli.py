"""CLI entrypoints for repograph commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, RepoGraphConfig, load_config
from .errors import RepoGraphError
from .graph import analyze_repository
from .llm.summarizer import Summarizer
from .logging import configure_logging, get_logger


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write log output to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .repograph.yml or the directory containing it.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repograph",
        description="Build file dependency graphs for public GitHub repositories.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Fetch a repository and print its graph as JSON.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_log_file_option(analyze_parser, suppress_default=True)
    _add_config_option(analyze_parser)
    analyze_parser.add_argument("url", help="Repository URL, e.g. https://github.com/owner/repo.")
    analyze_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result to this file instead of stdout.",
    )

    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Summarize a source file with the configured AI model.",
    )
    _add_verbose_option(summarize_parser, suppress_default=True)
    _add_log_file_option(summarize_parser, suppress_default=True)
    _add_config_option(summarize_parser)
    summarize_parser.add_argument("file", type=Path, help="Source file to summarize.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=3001, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repograph commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        config = load_config(args.config if args.config is not None else Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "analyze":
        _run_analyze(parser, config, args.url, args.output)
    elif args.command == "summarize":
        _run_summarize(parser, config, args.file)
    elif args.command == "serve":
        from .service import run_service

        logger.info("Serving on http://%s:%d", args.host, args.port)
        run_service(config, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_analyze(
    parser: argparse.ArgumentParser,
    config: RepoGraphConfig,
    url: str,
    output: Path | None,
) -> None:
    try:
        result = analyze_repository(url, config)
    except RepoGraphError as exc:
        get_logger("cli").debug("analyze failed: %s", exc)
        parser.exit(1, f"{exc.message}\nRun with --verbose for more details.\n")

    rendered = json.dumps(result.to_dict(), indent=2)
    if output is None:
        sys.stdout.write(rendered + "\n")
        return
    output.write_text(rendered + "\n", encoding="utf-8")
    print(f"Graph written to {output} ({len(result.nodes)} nodes, {len(result.edges)} links)")


def _run_summarize(parser: argparse.ArgumentParser, config: RepoGraphConfig, path: Path) -> None:
    try:
        code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        parser.exit(1, f"Unable to read {path}: {exc}\n")

    try:
        summary = Summarizer(config.summarizer).summarize(code)
    except ValueError as exc:
        parser.exit(1, f"{exc}\n")
    except RepoGraphError as exc:
        parser.exit(1, f"{exc.message}\n")
    print(summary)


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
