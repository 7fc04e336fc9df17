"""Logging setup for histsift.

The interactive session owns the terminal, so log records never go to the
console. When ``HISTSIFT_LOG`` names a level, records are written to a
rotating file in the user log directory; otherwise logging stays silent.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from enum import Enum
from pathlib import Path

from platformdirs import user_log_dir

LOG_LEVEL_ENV = "HISTSIFT_LOG"
LOG_PATH = Path(user_log_dir("histsift", appauthor=False)) / "histsift.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class LogLevel(str, Enum):
    """Available log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def _requested_level() -> LogLevel | None:
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not raw:
        return None
    try:
        return LogLevel(raw)
    except ValueError:
        return LogLevel.DEBUG


def configure_logging(log_path: Path | None = None) -> logging.Logger:
    """Attach handlers to the ``histsift`` logger and return it."""
    logger = logging.getLogger("histsift")
    logger.handlers.clear()
    logger.propagate = False

    level = _requested_level()
    if level is None:
        logger.addHandler(logging.NullHandler())
        return logger

    path = log_path or LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.value))
    return logger
