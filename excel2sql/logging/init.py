from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Application logging.

Everything the tool prints goes through one logger, ``excel2sql``, with a
single stdout handler rendering ``<LABEL> <message>`` lines. Pipeline modules
log via ``logging.getLogger(__name__)``; being children of ``excel2sql`` they
end up on the same handler, so a skipped row reads ``WARN sheet=... row=...``
next to the CLI's own ``INFO`` and ``SUMMARY`` lines.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "set_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "excel2sql"

# sits between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

_configured: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``<LABEL> <message>``; WARNING is shortened to WARN."""

    SHORT_NAMES = {"WARNING": "WARN"}

    def format(self, record: logging.LogRecord) -> str:
        label = self.SHORT_NAMES.get(record.levelname, record.levelname)
        return f"{label} {record.getMessage()}"


def _stdout_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging(debug: bool = False) -> logging.Logger:
    """Attach the stdout handler to the ``excel2sql`` logger, once per process.

    Later calls return the same logger; ``debug=True`` still switches an
    already configured logger to DEBUG.
    """
    global _configured

    if _configured is None:
        app = logging.getLogger(APP_LOGGER_NAME)
        app.handlers.clear()
        app.addHandler(_stdout_handler(sys.stdout))
        app.setLevel(logging.INFO)
        # the root logger must not print these lines a second time
        app.propagate = False
        _configured = app

    if debug:
        set_debug(_configured)
    return _configured


def set_debug(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    logger.debug("debug mode enabled")


def get_logger() -> logging.Logger:
    return _configured if _configured is not None else setup_logging()


def log_summary(message: str) -> None:
    """Emit ``message`` at SUMMARY level (printed as ``SUMMARY <message>``)."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Return the ``excel2sql`` logger to its unconfigured state (tests)."""
    global _configured
    app = logging.getLogger(APP_LOGGER_NAME)
    app.handlers.clear()
    app.setLevel(logging.NOTSET)
    app.propagate = True
    _configured = None
