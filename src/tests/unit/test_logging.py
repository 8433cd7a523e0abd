"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from loadstar.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    logger = logging.getLogger("loadstar")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.mark.unit
class TestSetupLogging:
    """Test handler choice and levels."""

    @pytest.mark.parametrize(
        ("verbosity", "level"),
        [("quiet", logging.ERROR), ("normal", logging.INFO), ("verbose", logging.DEBUG)],
    )
    def test_levels(self, verbosity, level) -> None:
        """Test each verbosity maps to its level."""
        assert setup_logging(verbosity).level == level

    def test_terminal_uses_rich(self) -> None:
        """Test no log file means a single RichHandler."""
        logger = setup_logging()
        assert logger.name == "loadstar"
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert not logger.propagate

    def test_log_file(self, tmp_path: Path) -> None:
        """Test a log file replaces the terminal handler and gets records."""
        log_file = tmp_path / "logs" / "loadstar.log"
        logger = setup_logging("verbose", log_file)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.FileHandler)

        logging.getLogger("loadstar.install.executor").debug("brew update")
        logger.handlers[0].flush()
        text = log_file.read_text(encoding="utf-8")
        assert "DEBUG" in text
        assert "loadstar.install.executor: brew update" in text

    def test_reconfigure_replaces_handlers(self, tmp_path: Path) -> None:
        """Test calling twice leaves one handler."""
        setup_logging()
        logger = setup_logging("normal", tmp_path / "loadstar.log")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.FileHandler)
