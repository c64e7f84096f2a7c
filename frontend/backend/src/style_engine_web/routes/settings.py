"""Settings, option catalog and stylesheet routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from style_engine import StyleEngine

from style_engine_web.dependencies import get_engine, require_modify_permission
from style_engine_web.models.settings import (
    CommitRequest,
    EffectSummary,
    ImportRequest,
    OptionsResponse,
    OptionSummary,
    SnapshotResponse,
)
from style_engine_web.services.responses import committed_snapshot, snapshot_response

router = APIRouter(prefix="/api", tags=["settings"])

# Module-level Depends instances to satisfy B008 linter rule
_engine_dep = Depends(get_engine)
_modify_dep = Depends(require_modify_permission)


@router.get("/health")
def health() -> dict[str, str]:
    """Simple health check for the web API."""
    return {"status": "ok"}


@router.get("/options", response_model=OptionsResponse)
def list_options(engine: StyleEngine = _engine_dep) -> OptionsResponse:
    """List registered option descriptors."""
    return OptionsResponse(
        options=[
            OptionSummary(
                key=descriptor.key,
                type=descriptor.type.value,
                default=descriptor.default,
                effect=EffectSummary(**descriptor.effect.to_dict()) if descriptor.effect else None,
                minimum=descriptor.minimum,
                maximum=descriptor.maximum,
                choices=list(descriptor.choices),
                max_length=descriptor.max_length,
                description=descriptor.description,
            )
            for descriptor in engine.options
        ]
    )


@router.get("/settings", response_model=SnapshotResponse)
def get_settings(engine: StyleEngine = _engine_dep) -> SnapshotResponse:
    """Return the current settings snapshot."""
    return snapshot_response(engine.store.get_snapshot())


@router.post("/settings", response_model=SnapshotResponse)
def commit_settings(
    request: CommitRequest,
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> SnapshotResponse:
    """Validate and commit a batch of values."""
    return snapshot_response(committed_snapshot(engine.commit(request.values)))


@router.post("/settings/reset", response_model=SnapshotResponse)
def reset_settings(
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> SnapshotResponse:
    """Reset every option to its default."""
    return snapshot_response(committed_snapshot(engine.reset_to_defaults()))


@router.get("/settings/export")
def export_settings(engine: StyleEngine = _engine_dep) -> Response:
    """Download the current settings as an export document."""
    return Response(
        content=engine.store.export_snapshot(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="style-settings.json"'},
    )


@router.post("/settings/import", response_model=SnapshotResponse)
def import_settings(
    request: ImportRequest,
    engine: StyleEngine = _engine_dep,
    _actor: str | None = _modify_dep,
) -> SnapshotResponse:
    """Import an export document through the regular commit path."""
    return snapshot_response(committed_snapshot(engine.import_snapshot(request.document)))


@router.get("/stylesheet")
def get_stylesheet(engine: StyleEngine = _engine_dep) -> Response:
    """Return the stylesheet generated from the current snapshot."""
    return Response(
        content=engine.stylesheet.build(),
        media_type="text/css",
        headers={
            "X-Settings-Version": str(engine.store.version),
            "X-Body-Classes": " ".join(engine.stylesheet.body_classes()),
        },
    )
