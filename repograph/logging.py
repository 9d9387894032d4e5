"""Logger hierarchy for repograph.

Every module logs through ``get_logger("<component>")`` so output can be
configured once from the CLI entrypoint.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "repograph"
CONSOLE_FORMAT = "[repograph] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send repograph logs to stderr and, when ``log_file`` is set, to that file.

    Edge extraction logs from worker threads, so the file format records the
    thread name. Handlers from an earlier call are closed before new ones are
    installed.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
