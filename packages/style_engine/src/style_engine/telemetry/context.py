"""Commit context propagated through logging."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from style_engine.utils import new_id

if TYPE_CHECKING:
    from collections.abc import Iterator

_commit_id_ctx: ContextVar[str | None] = ContextVar("commit_id", default=None)


def get_commit_id() -> str | None:
    """Return the id of the commit being processed, if any."""
    return _commit_id_ctx.get()


@contextmanager
def commit_context(commit_id: str | None = None) -> Iterator[str]:
    """Bind a commit id for the duration of the block."""
    commit_id = commit_id or new_id()
    token = _commit_id_ctx.set(commit_id)
    try:
        yield commit_id
    finally:
        _commit_id_ctx.reset(token)
