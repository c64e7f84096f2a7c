"""Named value sets stored as JSON documents."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from style_engine.errors import PersistenceError
from style_engine.utils import slugify, utc_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping

    from style_engine.sanitize.models import ValidationError
    from style_engine.sanitize.pipeline import SanitizationPipeline
    from style_engine.store.models import CommitResult
    from style_engine.store.store import SettingsStore

logger = logging.getLogger(__name__)

PRESET_ID_PATTERN = re.compile(r"^[a-z0-9-]+$")


@dataclass(frozen=True)
class Preset:
    """Saved set of option values."""

    id: str
    name: str
    values: dict[str, Any]
    description: str = ""
    created_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "values": dict(self.values),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Preset:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            values=dict(data.get("values", {})),
            description=str(data.get("description", "")),
            created_at=str(data.get("created_at", "")),
        )


@dataclass(frozen=True)
class PresetResult:
    """Outcome of saving a preset."""

    preset: Preset | None
    errors: tuple[ValidationError, ...] = ()

    @property
    def ok(self) -> bool:
        return self.preset is not None and not self.errors


class PresetLibrary:
    """Directory of preset documents, one ``<id>.json`` per preset.

    Values are validated when saved and committed through the store when applied.
    """

    def __init__(
        self,
        base_dir: str | Path,
        pipeline: SanitizationPipeline,
        store: SettingsStore,
    ) -> None:
        self._base_dir = Path(base_dir)
        self._pipeline = pipeline
        self._store = store

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def save(
        self,
        name: str,
        values: Mapping[str, Any],
        *,
        description: str = "",
        preset_id: str | None = None,
    ) -> PresetResult:
        """Validate and write a preset, replacing any preset with the same id."""
        identifier = preset_id or slugify(name)
        _check_id(identifier)
        result = self._pipeline.sanitize_and_validate(values)
        if not result.ok or result.values is None:
            return PresetResult(preset=None, errors=result.errors)
        preset = Preset(
            id=identifier,
            name=name.strip() or identifier,
            values=dict(result.values),
            description=description,
        )
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            self._path(identifier).write_text(
                json.dumps(preset.to_dict(), indent=2, sort_keys=True), encoding="utf-8"
            )
        except OSError as exc:
            msg = f"Could not write preset {identifier}: {exc}"
            raise PersistenceError(msg) from exc
        logger.info("Saved preset %s with %d value(s)", identifier, len(preset.values))
        return PresetResult(preset=preset)

    def list(self) -> list[Preset]:
        """Return all readable presets sorted by id."""
        if not self._base_dir.exists():
            return []
        presets = []
        for path in sorted(self._base_dir.glob("*.json")):
            preset = self._read(path)
            if preset is not None:
                presets.append(preset)
        return presets

    def get(self, preset_id: str) -> Preset | None:
        """Fetch a preset by id."""
        _check_id(preset_id)
        path = self._path(preset_id)
        if not path.exists():
            return None
        return self._read(path)

    def delete(self, preset_id: str) -> bool:
        """Delete a preset. Returns whether it existed."""
        _check_id(preset_id)
        path = self._path(preset_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            msg = f"Could not delete preset {preset_id}: {exc}"
            raise PersistenceError(msg) from exc
        logger.info("Deleted preset %s", preset_id)
        return True

    def apply(self, preset_id: str) -> CommitResult:
        """Commit a preset's values. Raises KeyError for unknown presets."""
        preset = self.get(preset_id)
        if preset is None:
            msg = f"Unknown preset: {preset_id}"
            raise KeyError(msg)
        return self._store.commit(preset.values)

    def _path(self, preset_id: str) -> Path:
        return self._base_dir / f"{preset_id}.json"

    def _read(self, path: Path) -> Preset | None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Preset.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Skipping unreadable preset %s: %s", path.name, exc)
            return None


def _check_id(preset_id: str) -> None:
    if not PRESET_ID_PATTERN.match(preset_id):
        msg = f"Invalid preset id: {preset_id!r}"
        raise ValueError(msg)
