"""Shared utilities for the style engine."""

from __future__ import annotations

import re
import secrets
from datetime import UTC, datetime

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def utc_timestamp() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(UTC).isoformat()


def new_id() -> str:
    """Generate a short random identifier."""
    return secrets.token_hex(4)


def slugify(value: str) -> str:
    """Lowercase a value and collapse anything non-alphanumeric into dashes."""
    return _SLUG_PATTERN.sub("-", value.strip().lower()).strip("-")
