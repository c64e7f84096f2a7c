"""Pydantic models for the style engine web API."""

from style_engine_web.models.base import ApiModel
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
from style_engine_web.models.presets import (
    PresetCreateRequest,
    PresetListResponse,
    PresetSummary,
)
from style_engine_web.models.settings import (
    CommitFailure,
    CommitRequest,
    EffectSummary,
    ImportRequest,
    OptionsResponse,
    OptionSummary,
    PreviewRequest,
    PreviewResponse,
    SnapshotResponse,
    ValidationErrorSummary,
)

__all__ = [
    "ApiModel",
    "CacheStatsResponse",
    "CallbackSummary",
    "CommitFailure",
    "CommitRequest",
    "EffectSummary",
    "ExecutionStatSummary",
    "ExtensionErrorSummary",
    "ExtensionPointSummary",
    "ExtensionPointsResponse",
    "ExtensionStatsResponse",
    "ImportRequest",
    "OptionSummary",
    "OptionsResponse",
    "PresetCreateRequest",
    "PresetListResponse",
    "PresetSummary",
    "PreviewRequest",
    "PreviewResponse",
    "RejectionSummary",
    "SecurityStatsResponse",
    "SnapshotResponse",
    "ValidationErrorSummary",
]
