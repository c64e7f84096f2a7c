"""Read-only diagnostics: extension, cache and security stats, extension point catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from style_engine import StyleEngine

from style_engine_web.dependencies import get_engine
from style_engine_web.models.diagnostics import (
    CacheStatsResponse,
    CallbackSummary,
    ExecutionStatSummary,
    ExtensionErrorSummary,
    ExtensionPointsResponse,
    ExtensionPointSummary,
    ExtensionStatsResponse,
    RejectionSummary,
    SecurityStatsResponse,
)

router = APIRouter(prefix="/api", tags=["diagnostics"])

_engine_dep = Depends(get_engine)


@router.get("/stats/extensions", response_model=ExtensionStatsResponse)
def extension_stats(engine: StyleEngine = _engine_dep) -> ExtensionStatsResponse:
    """Return execution stats for every invoked extension point."""
    registry = engine.extensions
    summary = registry.stats_summary()
    return ExtensionStatsResponse(
        stats=[
            ExecutionStatSummary(
                extension_point_name=stat.extension_point_name,
                invocation_count=stat.invocation_count,
                total_duration_nanos=stat.total_duration_nanos,
                average_duration_nanos=stat.average_duration_nanos,
                last_invoked_at=stat.last_invoked_at,
            )
            for stat in sorted(
                registry.get_stats().values(), key=lambda item: item.extension_point_name
            )
        ],
        total_executions=summary["total_executions"],
        total_duration_nanos=summary["total_duration_nanos"],
        most_used=summary["most_used"],
        slowest=summary["slowest"],
        errors=[
            ExtensionErrorSummary(
                extension_point_name=error.extension_point_name,
                callback_id=error.callback_id,
                handler_name=error.handler_name,
                message=error.message,
                occurred_at=error.occurred_at,
            )
            for error in list(registry.errors)
        ],
    )


@router.get("/stats/cache", response_model=CacheStatsResponse)
def cache_stats(engine: StyleEngine = _engine_dep) -> CacheStatsResponse:
    """Return cache counters."""
    stats = engine.cache.get_stats()
    return CacheStatsResponse(
        item_count=stats.item_count,
        total_bytes=stats.total_bytes,
        hit_count=stats.hit_count,
        miss_count=stats.miss_count,
        hit_rate=stats.hit_rate,
        persistent_item_count=stats.persistent_item_count,
        persistent_total_bytes=stats.persistent_total_bytes,
        invalidations=stats.invalidations,
        generation=stats.generation,
    )


@router.get("/extension-points", response_model=ExtensionPointsResponse)
def extension_points(engine: StyleEngine = _engine_dep) -> ExtensionPointsResponse:
    """Document every declared or registered extension point."""
    return ExtensionPointsResponse(
        extension_points=[
            ExtensionPointSummary(
                name=entry["name"],
                kind=entry["kind"],
                description=entry["description"],
                parameters=entry["parameters"],
                returns=entry["returns"],
                declared=entry["declared"],
                has_callbacks=entry["has_callbacks"],
                callbacks=[CallbackSummary(**callback) for callback in entry["callbacks"]],
            )
            for entry in engine.extensions.describe().values()
        ]
    )


@router.get("/stats/security", response_model=SecurityStatsResponse)
def security_stats(
    limit: int = 50,
    engine: StyleEngine = _engine_dep,
) -> SecurityStatsResponse:
    """Return rejection counters and the most recent rejected batches."""
    pipeline = engine.pipeline
    stats = pipeline.security_stats()
    return SecurityStatsResponse(
        total_rejections=stats["total_rejections"],
        security_rejections=stats["security_rejections"],
        pattern_matches=stats["pattern_matches"],
        active_pattern_count=stats["active_pattern_count"],
        validator_count=stats["validator_count"],
        history=[
            RejectionSummary(**record.to_dict())
            for record in reversed(pipeline.rejection_history(max(1, limit)))
        ],
    )
