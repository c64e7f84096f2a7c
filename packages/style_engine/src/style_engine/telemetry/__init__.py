"""Logging and commit-correlation helpers."""

from style_engine.telemetry.context import commit_context, get_commit_id
from style_engine.telemetry.logging_utils import (
    CommitContextFilter,
    configure_logging,
    install_commit_log_filter,
)

__all__ = [
    "CommitContextFilter",
    "commit_context",
    "configure_logging",
    "get_commit_id",
    "install_commit_log_filter",
]
