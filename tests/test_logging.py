"""Tests for logging setup."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from dotlink.core.logging import setup_logging


def test_console_only() -> None:
    setup_logging()

    logger = logging.getLogger("dotlink")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.handlers[0].level == logging.WARNING


def test_debug_and_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "dotlink.log"

    setup_logging(debug=True, log_file=str(log_file))
    logging.getLogger("dotlink.core.reconcile").info("Linked %s", "alpha")

    logger = logging.getLogger("dotlink")
    assert logger.handlers[0].level == logging.DEBUG
    for handler in logger.handlers:
        handler.flush()
    assert "Linked alpha" in log_file.read_text()


def test_repeated_setup_replaces_handlers(tmp_path: Path) -> None:
    setup_logging(log_file=str(tmp_path / "a.log"))
    setup_logging()

    assert len(logging.getLogger("dotlink").handlers) == 1
