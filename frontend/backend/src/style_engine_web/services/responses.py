"""Translate engine results into API responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException
from style_engine import FailureKind

from style_engine_web.models.settings import (
    CommitFailure,
    SnapshotResponse,
    ValidationErrorSummary,
)

if TYPE_CHECKING:
    from style_engine import CommitResult, SettingsSnapshot

FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.VALIDATION: 422,
    FailureKind.SECURITY: 422,
    FailureKind.PERSISTENCE: 503,
    FailureKind.IMPORT_FORMAT: 400,
}


def snapshot_response(snapshot: SettingsSnapshot) -> SnapshotResponse:
    """Convert a snapshot to its API model."""
    return SnapshotResponse(
        version=snapshot.version,
        values=dict(snapshot.values),
        updated_at=snapshot.updated_at,
    )


def committed_snapshot(result: CommitResult) -> SettingsSnapshot:
    """Return the committed snapshot or raise the matching HTTP error."""
    if result.ok and result.snapshot is not None:
        return result.snapshot
    failure = result.failure or FailureKind.VALIDATION
    body = CommitFailure(
        failure=failure.value,
        message=result.message,
        errors=[
            ValidationErrorSummary(**error.to_dict())
            for error in result.errors
        ],
    )
    raise HTTPException(status_code=FAILURE_STATUS[failure], detail=body.to_wire())
