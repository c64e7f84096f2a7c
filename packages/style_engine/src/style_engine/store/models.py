"""Commit outcomes returned by the settings store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from style_engine.models.snapshot import SettingsSnapshot
    from style_engine.sanitize.models import ValidationError


class CommitState(str, Enum):
    """Phase of the commit currently running, if any."""

    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    PERSISTING = "persisting"
    COMMITTED = "committed"


class FailureKind(str, Enum):
    """Why a commit did not advance the snapshot."""

    VALIDATION = "validation"
    SECURITY = "security"
    PERSISTENCE = "persistence"
    IMPORT_FORMAT = "import_format"


@dataclass(frozen=True)
class CommitResult:
    """Outcome of ``commit``, ``import_snapshot`` or ``reset_to_defaults``."""

    snapshot: SettingsSnapshot | None
    errors: tuple[ValidationError, ...] = ()
    failure: FailureKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        """Whether a new snapshot became current."""
        return self.failure is None and self.snapshot is not None

    @classmethod
    def committed(cls, snapshot: SettingsSnapshot) -> CommitResult:
        return cls(snapshot=snapshot)

    @classmethod
    def rejected(cls, errors: tuple[ValidationError, ...], *, security: bool) -> CommitResult:
        failure = FailureKind.SECURITY if security else FailureKind.VALIDATION
        return cls(
            snapshot=None,
            errors=errors,
            failure=failure,
            message=f"{len(errors)} field(s) rejected",
        )

    @classmethod
    def failed(cls, failure: FailureKind, message: str) -> CommitResult:
        return cls(snapshot=None, failure=failure, message=message)
