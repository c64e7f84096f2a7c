"""Load option catalogs from TOML."""

from __future__ import annotations

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from style_engine.errors import OptionRegistryError
from style_engine.models.options import EffectBinding, OptionDescriptor
from style_engine.options.registry import OptionRegistry

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = "default_options.toml"


def _read_catalog(path: str | Path | None) -> dict[str, Any]:
    """Read the TOML catalog at ``path`` or the bundled one."""
    if path is None:
        text = resources.files("style_engine.options").joinpath(BUNDLED_CATALOG).read_text(
            encoding="utf-8"
        )
        return tomllib.loads(text)
    file_path = Path(path)
    if not file_path.exists():
        message = f"Option catalog not found: {file_path}"
        raise OptionRegistryError(message)
    with file_path.open("rb") as file:
        return tomllib.load(file)


def _build_effect(key: str, raw: Any) -> EffectBinding | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        message = f"Option '{key}' effect must be a table"
        raise OptionRegistryError(message)
    return EffectBinding(
        kind=raw.get("kind", ""),
        target=str(raw.get("target", "")),
        unit=str(raw.get("unit", "")),
    )


def build_descriptor(key: str, config: dict[str, Any]) -> OptionDescriptor:
    """Build a descriptor from one ``[options.<key>]`` table."""
    try:
        return OptionDescriptor(
            key=key,
            type=config.get("type", ""),
            default=config.get("default"),
            effect=_build_effect(key, config.get("effect")),
            minimum=config.get("min"),
            maximum=config.get("max"),
            choices=tuple(config.get("choices", ())),
            max_length=config.get("max_length"),
            validator=config.get("validator"),
            description=str(config.get("description", "")),
        )
    except ValueError as exc:
        message = f"Invalid option '{key}': {exc}"
        raise OptionRegistryError(message) from exc


def load_option_catalog(path: str | Path | None = None, *, freeze: bool = True) -> OptionRegistry:
    """Load option descriptors into a new registry."""
    data = _read_catalog(path)
    registry = OptionRegistry()
    for key, config in data.get("options", {}).items():
        registry.register(build_descriptor(key, config))
    if freeze:
        registry.freeze()
    logger.debug("Loaded %d options from %s", len(registry), path or BUNDLED_CATALOG)
    return registry
