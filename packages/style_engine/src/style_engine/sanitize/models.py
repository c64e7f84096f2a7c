"""Validation results produced by the sanitization pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class ValidationReason(str, Enum):
    """Why a field was rejected."""

    TYPE_MISMATCH = "typeMismatch"
    OUT_OF_RANGE = "outOfRange"
    THREAT_PATTERN_MATCHED = "threatPatternMatched"
    UNKNOWN_KEY = "unknownKey"


@dataclass(frozen=True)
class ValidationError:
    """Field-level rejection. Produced, never persisted."""

    key: str
    reason: ValidationReason
    detail: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-compatible dict."""
        return {"key": self.key, "reason": self.reason.value, "detail": self.detail}


@dataclass(frozen=True)
class SanitizeResult:
    """All-or-nothing outcome of one batch.

    ``values`` is the full merged value map on success and ``None`` on failure.
    """

    values: Mapping[str, Any] | None
    errors: tuple[ValidationError, ...] = ()

    @property
    def ok(self) -> bool:
        """Whether the batch passed."""
        return self.values is not None and not self.errors

    @property
    def security_rejection(self) -> bool:
        """Whether any field matched a threat pattern."""
        return any(
            error.reason is ValidationReason.THREAT_PATTERN_MATCHED for error in self.errors
        )


@dataclass(frozen=True)
class RejectionRecord:
    """One rejected batch kept in the pipeline's history."""

    occurred_at: str
    keys: tuple[str, ...]
    reasons: tuple[str, ...]
    patterns: tuple[str, ...] = ()

    @property
    def security(self) -> bool:
        """Whether a threat pattern caused the rejection."""
        return bool(self.patterns)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict."""
        return {
            "occurred_at": self.occurred_at,
            "keys": list(self.keys),
            "reasons": list(self.reasons),
            "patterns": list(self.patterns),
            "security": self.security,
        }
