"""Tests for logger configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from repograph.logging import configure_logging, get_logger


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("repograph")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_get_logger_nests_under_package_logger() -> None:
    assert get_logger().name == "repograph"
    assert get_logger("graph").name == "repograph.graph"


def test_log_file_receives_component_records(restore_logger, tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "repograph.log"

    configure_logging(verbose=True, log_file=log_file)
    get_logger("graph").debug("Assembled %d nodes", 3)
    for handler in restore_logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG repograph.graph [MainThread]: Assembled 3 nodes" in text


def test_reconfiguring_replaces_and_closes_handlers(restore_logger, tmp_path: Path) -> None:
    configure_logging(log_file=tmp_path / "first.log")
    (file_handler,) = [h for h in restore_logger.handlers if isinstance(h, logging.FileHandler)]

    configure_logging()

    assert file_handler.stream is None
    assert len(restore_logger.handlers) == 1
    assert restore_logger.level == logging.INFO
    assert restore_logger.propagate is False
