"""Versioned export documents."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from style_engine.errors import ImportFormatError
from style_engine.utils import utc_timestamp

if TYPE_CHECKING:
    from style_engine.models.snapshot import SettingsSnapshot

EXPORT_FORMAT_VERSION = 1
SUPPORTED_FORMAT_VERSIONS = frozenset({EXPORT_FORMAT_VERSION})


class ExportDocument(BaseModel):
    """Serialized settings: ``{formatVersion, exportedAt, values}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    format_version: int = Field(alias="formatVersion")
    exported_at: str = Field(alias="exportedAt")
    values: dict[str, Any]


def build_export(snapshot: SettingsSnapshot) -> str:
    """Serialize a snapshot as an export document."""
    document = ExportDocument(
        format_version=EXPORT_FORMAT_VERSION,
        exported_at=utc_timestamp(),
        values=dict(snapshot.values),
    )
    return document.model_dump_json(by_alias=True, indent=2)


def parse_export(blob: str | bytes) -> ExportDocument:
    """Parse an export document, rejecting unknown format versions before anything else."""
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as exc:
        msg = f"Export document is not valid JSON: {exc}"
        raise ImportFormatError(msg) from exc
    if not isinstance(data, dict):
        msg = "Export document must be a JSON object"
        raise ImportFormatError(msg)
    version = data.get("formatVersion")
    if isinstance(version, bool) or not isinstance(version, int):
        msg = "Export document has no integer formatVersion"
        raise ImportFormatError(msg)
    if version not in SUPPORTED_FORMAT_VERSIONS:
        msg = f"Unsupported export formatVersion {version}"
        raise ImportFormatError(msg)
    try:
        return ExportDocument.model_validate(data)
    except PydanticValidationError as exc:
        msg = f"Malformed export document: {exc.error_count()} problem(s)"
        raise ImportFormatError(msg) from exc
