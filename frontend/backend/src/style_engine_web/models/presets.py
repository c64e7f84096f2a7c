"""Preset API models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from style_engine_web.models.base import ApiModel


class PresetSummary(ApiModel):
    id: str
    name: str
    description: str = ""
    values: dict[str, Any]
    created_at: str = Field(alias="createdAt")


class PresetListResponse(ApiModel):
    presets: list[PresetSummary]


class PresetCreateRequest(ApiModel):
    """Save a named set of values."""

    name: str
    values: dict[str, Any]
    description: str = ""
