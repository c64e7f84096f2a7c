"""Settings, option and preview API models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from style_engine_web.models.base import ApiModel


class EffectSummary(ApiModel):
    """Effect binding of an option."""

    kind: str
    target: str
    unit: str = ""


class OptionSummary(ApiModel):
    """Option descriptor for the settings UI."""

    key: str
    type: str
    default: Any = None
    effect: EffectSummary | None = None
    minimum: float | None = None
    maximum: float | None = None
    choices: list[str] = Field(default_factory=list)
    max_length: int | None = Field(default=None, alias="maxLength")
    description: str = ""


class OptionsResponse(ApiModel):
    options: list[OptionSummary]


class SnapshotResponse(ApiModel):
    """Current settings snapshot."""

    version: int
    values: dict[str, Any]
    updated_at: str = Field(alias="updatedAt")


class CommitRequest(ApiModel):
    """Batch of raw values to commit."""

    values: dict[str, Any]


class ImportRequest(ApiModel):
    """Export document text to import."""

    document: str


class ValidationErrorSummary(ApiModel):
    key: str
    reason: str
    detail: str = ""


class CommitFailure(ApiModel):
    """Body of a rejected or failed commit."""

    failure: str
    message: str
    errors: list[ValidationErrorSummary] = Field(default_factory=list)


class PreviewRequest(ApiModel):
    """Live edit of one bound control."""

    control_id: str = Field(alias="controlId")
    value: Any = None


class PreviewResponse(ApiModel):
    """Renderer state after a live edit."""

    css_variables: dict[str, str] = Field(default_factory=dict, alias="cssVariables")
    body_classes: list[str] = Field(default_factory=list, alias="bodyClasses")
    css_blocks: dict[str, str] = Field(default_factory=dict, alias="cssBlocks")
    pending: dict[str, Any] = Field(default_factory=dict)
