"""Pydantic model for engine configuration."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel


class EngineSettings(BaseModel, frozen=True):
    """Runtime configuration loaded from environment variables."""

    debounce_ms: int = 300
    cache_max_items: int = 256
    cache_max_bytes: int = 1_048_576
    storage_path: str = ".data/style_engine.db"
    options_file: str | None = None
    presets_dir: str = ".data/presets"
    log_level: str = "INFO"

    @property
    def debounce_seconds(self) -> float:
        """Quiescence window in seconds."""
        return self.debounce_ms / 1000


def _positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""
    raw = os.getenv(name, str(default))
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = f"{name} must be positive, got {value}"
        raise ValueError(msg)
    return value


def load_settings() -> EngineSettings:
    """Load settings from environment variables with defaults."""
    load_dotenv()

    return EngineSettings(
        debounce_ms=_positive_int("STYLE_ENGINE_DEBOUNCE_MS", 300),
        cache_max_items=_positive_int("STYLE_ENGINE_CACHE_MAX_ITEMS", 256),
        cache_max_bytes=_positive_int("STYLE_ENGINE_CACHE_MAX_BYTES", 1_048_576),
        storage_path=os.getenv("STYLE_ENGINE_STORAGE_PATH", ".data/style_engine.db"),
        options_file=os.getenv("STYLE_ENGINE_OPTIONS_FILE") or None,
        presets_dir=os.getenv("STYLE_ENGINE_PRESETS_DIR", ".data/presets"),
        log_level=os.getenv("STYLE_ENGINE_LOG_LEVEL", "INFO").upper(),
    )
