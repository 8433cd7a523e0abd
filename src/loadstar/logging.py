"""Logging configuration for the loadstar CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

err_console = Console(stderr=True)

Verbosity = Literal["quiet", "normal", "verbose"]

_LEVELS: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}


def setup_logging(
    verbosity: Verbosity = "normal",
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the ``loadstar`` logger.

    Plain commands log to stderr through Rich. When ``log_file`` is given,
    records go to that file instead; the full-screen wizard always logs to
    a file so log output never lands on top of the rendered UI.
    """
    logger = logging.getLogger("loadstar")
    logger.handlers.clear()
    logger.setLevel(_LEVELS[verbosity])
    logger.propagate = False

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
        )
    else:
        handler = RichHandler(
            console=err_console,
            show_time=verbosity == "verbose",
            show_path=verbosity == "verbose",
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    return logger
