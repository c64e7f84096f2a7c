"""Data models shared across engine components."""

from style_engine.models.options import EffectBinding, EffectKind, OptionDescriptor, OptionType
from style_engine.models.settings import EngineSettings, load_settings
from style_engine.models.snapshot import SettingsSnapshot

__all__ = [
    "EffectBinding",
    "EffectKind",
    "EngineSettings",
    "OptionDescriptor",
    "OptionType",
    "SettingsSnapshot",
    "load_settings",
]
