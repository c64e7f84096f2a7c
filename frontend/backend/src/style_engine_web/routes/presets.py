"""Preset routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from style_engine import FailureKind, PersistenceError, Preset, StyleEngine
from style_engine.sanitize import ValidationReason

from style_engine_web.dependencies import get_engine, require_modify_permission
from style_engine_web.models.presets import (
    PresetCreateRequest,
    PresetListResponse,
    PresetSummary,
)
from style_engine_web.models.settings import CommitFailure, SnapshotResponse, ValidationErrorSummary
from style_engine_web.services.responses import FAILURE_STATUS, committed_snapshot, snapshot_response

router = APIRouter(prefix="/api", tags=["presets"])

_engine_dep = Depends(get_engine)
_modify_dep = Depends(require_modify_permission)


def _summary(preset: Preset) -> PresetSummary:
    return PresetSummary(
        id=preset.id,
        name=preset.name,
        description=preset.description,
        values=dict(preset.values),
        created_at=preset.created_at,
    )


@router.get("/presets", response_model=PresetListResponse)
def list_presets(engine: StyleEngine = _engine_dep) -> PresetListResponse:
    """List saved presets."""
    return PresetListResponse(presets=[_summary(preset) for preset in engine.presets.list()])


@router.post("/presets", response_model=PresetSummary)
def create_preset(
    request: PresetCreateRequest,
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> PresetSummary:
    """Validate and save a preset."""
    try:
        result = engine.presets.save(
            request.name, request.values, description=request.description
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=FAILURE_STATUS[FailureKind.PERSISTENCE], detail=str(exc)
        ) from exc
    if not result.ok or result.preset is None:
        security = any(
            error.reason is ValidationReason.THREAT_PATTERN_MATCHED for error in result.errors
        )
        failure = FailureKind.SECURITY if security else FailureKind.VALIDATION
        body = CommitFailure(
            failure=failure.value,
            message=f"{len(result.errors)} field(s) rejected",
            errors=[ValidationErrorSummary(**error.to_dict()) for error in result.errors],
        )
        raise HTTPException(
            status_code=FAILURE_STATUS[failure], detail=body.to_wire()
        )
    return _summary(result.preset)


@router.post("/presets/{preset_id}/apply", response_model=SnapshotResponse)
def apply_preset(
    preset_id: str,
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> SnapshotResponse:
    """Commit a preset's values and refresh bound controls."""
    try:
        result = engine.presets.apply(preset_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Preset not found") from exc
    snapshot = committed_snapshot(result)
    engine.dispatcher.refresh_all()
    return snapshot_response(snapshot)


@router.delete("/presets/{preset_id}")
def delete_preset(
    preset_id: str,
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> dict[str, bool]:
    """Delete a preset."""
    try:
        deleted = engine.presets.delete(preset_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=FAILURE_STATUS[FailureKind.PERSISTENCE], detail=str(exc)
        ) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="Preset not found")
    return {"deleted": True}
