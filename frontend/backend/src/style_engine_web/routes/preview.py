"""Live preview routes backed by the headless renderer."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from style_engine import RecordingRenderer, StyleEngine

from style_engine_web.dependencies import get_engine, require_modify_permission
from style_engine_web.models.settings import PreviewRequest, PreviewResponse, SnapshotResponse
from style_engine_web.services.responses import committed_snapshot, snapshot_response

router = APIRouter(prefix="/api", tags=["preview"])

_engine_dep = Depends(get_engine)
_modify_dep = Depends(require_modify_permission)


def _preview_state(engine: StyleEngine) -> PreviewResponse:
    renderer = engine.renderer
    state = renderer.state() if isinstance(renderer, RecordingRenderer) else {}
    return PreviewResponse(
        css_variables=state.get("css_variables", {}),
        body_classes=state.get("body_classes", []),
        css_blocks=state.get("css_blocks", {}),
        pending=engine.dispatcher.pending,
    )


@router.get("/preview", response_model=PreviewResponse)
def get_preview(engine: StyleEngine = _engine_dep) -> PreviewResponse:
    """Return the live preview state."""
    return _preview_state(engine)


@router.post("/preview", response_model=PreviewResponse)
def preview_change(
    request: PreviewRequest,
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> PreviewResponse:
    """Apply a control edit immediately and schedule its debounced commit."""
    try:
        engine.dispatcher.on_control_changed(request.control_id, request.value)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown control: {request.control_id}") from exc
    return _preview_state(engine)


@router.post("/preview/flush", response_model=SnapshotResponse)
def flush_preview(
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> SnapshotResponse:
    """Commit pending preview edits without waiting for the debounce window."""
    result = engine.dispatcher.flush()
    if result is None:
        return snapshot_response(engine.store.get_snapshot())
    return snapshot_response(committed_snapshot(result))
