"""Logging helpers for commit correlation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from style_engine.telemetry.context import get_commit_id

if TYPE_CHECKING:
    from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s %(name)s - %(levelname)s - commit=%(commit_id)s - %(message)s"


class CommitContextFilter(logging.Filter):
    """Attach the active commit id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject commit_id into the log record."""
        record.commit_id = get_commit_id() or "-"
        return True


def install_commit_log_filter(loggers: Iterable[logging.Logger] | None = None) -> None:
    """Install commit context filters.

    Args:
        loggers: Optional iterable of loggers to attach the filter to. Defaults to root logger.
    """
    targets = list(loggers) if loggers is not None else [logging.getLogger()]
    for logger in targets:
        if any(isinstance(flt, CommitContextFilter) for flt in logger.filters):
            continue
        logger.addFilter(CommitContextFilter())


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the ``style_engine`` logger."""
    logger = logging.getLogger("style_engine")
    logger.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CommitContextFilter())
        logger.addHandler(handler)
    return logger
