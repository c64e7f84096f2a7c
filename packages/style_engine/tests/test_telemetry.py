from __future__ import annotations

import logging

from style_engine.telemetry import (
    CommitContextFilter,
    commit_context,
    configure_logging,
    get_commit_id,
    install_commit_log_filter,
)


def test_commit_context_sets_and_resets() -> None:
    assert get_commit_id() is None
    with commit_context("abc") as commit_id:
        assert commit_id == "abc"
        assert get_commit_id() == "abc"
    assert get_commit_id() is None


def test_filter_injects_commit_id() -> None:
    record = logging.LogRecord("style_engine", logging.INFO, __file__, 1, "msg", None, None)
    CommitContextFilter().filter(record)
    assert record.commit_id == "-"

    with commit_context("c-1"):
        CommitContextFilter().filter(record)
    assert record.commit_id == "c-1"


def test_install_filter_is_idempotent() -> None:
    target = logging.getLogger("style_engine.test.install")
    install_commit_log_filter([target])
    install_commit_log_filter([target])
    assert sum(isinstance(flt, CommitContextFilter) for flt in target.filters) == 1


def test_configure_logging_adds_one_handler() -> None:
    logger = configure_logging("DEBUG")
    configure_logging("DEBUG")
    handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
    assert len(handlers) == 1
    assert logger.level == logging.DEBUG
