"""Diagnostics API models for extension and cache stats."""

from __future__ import annotations

from pydantic import Field

from style_engine_web.models.base import ApiModel


class ExecutionStatSummary(ApiModel):
    extension_point_name: str = Field(alias="extensionPointName")
    invocation_count: int = Field(alias="invocationCount")
    total_duration_nanos: int = Field(alias="totalDurationNanos")
    average_duration_nanos: float = Field(alias="averageDurationNanos")
    last_invoked_at: str = Field(alias="lastInvokedAt")


class ExtensionErrorSummary(ApiModel):
    extension_point_name: str = Field(alias="extensionPointName")
    callback_id: str = Field(alias="callbackId")
    handler_name: str = Field(alias="handlerName")
    message: str
    occurred_at: str = Field(alias="occurredAt")


class ExtensionStatsResponse(ApiModel):
    """Per-point execution stats with an aggregate summary."""

    stats: list[ExecutionStatSummary]
    total_executions: int = Field(alias="totalExecutions")
    total_duration_nanos: int = Field(alias="totalDurationNanos")
    most_used: str | None = Field(default=None, alias="mostUsed")
    slowest: str | None = None
    errors: list[ExtensionErrorSummary] = Field(default_factory=list)


class CacheStatsResponse(ApiModel):
    item_count: int = Field(alias="itemCount")
    total_bytes: int = Field(alias="totalBytes")
    hit_count: int = Field(alias="hitCount")
    miss_count: int = Field(alias="missCount")
    hit_rate: float = Field(alias="hitRate")
    persistent_item_count: int = Field(alias="persistentItemCount")
    persistent_total_bytes: int = Field(alias="persistentTotalBytes")
    invalidations: int
    generation: int


class CallbackSummary(ApiModel):
    id: str
    priority: int
    handler: str
    owner: str = ""


class ExtensionPointSummary(ApiModel):
    """Documentation for one extension point."""

    name: str
    kind: str
    description: str = ""
    parameters: list[str] = Field(default_factory=list)
    returns: str = ""
    declared: bool = True
    has_callbacks: bool = Field(default=False, alias="hasCallbacks")
    callbacks: list[CallbackSummary] = Field(default_factory=list)


class ExtensionPointsResponse(ApiModel):
    extension_points: list[ExtensionPointSummary] = Field(alias="extensionPoints")


class RejectionSummary(ApiModel):
    occurred_at: str = Field(alias="occurredAt")
    keys: list[str]
    reasons: list[str]
    patterns: list[str] = Field(default_factory=list)
    security: bool = False


class SecurityStatsResponse(ApiModel):
    """Rejection counters and recent rejected batches."""

    total_rejections: int = Field(alias="totalRejections")
    security_rejections: int = Field(alias="securityRejections")
    pattern_matches: dict[str, int] = Field(default_factory=dict, alias="patternMatches")
    active_pattern_count: int = Field(alias="activePatternCount")
    validator_count: int = Field(alias="validatorCount")
    history: list[RejectionSummary] = Field(default_factory=list)
