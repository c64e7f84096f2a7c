"""Data-driven settings synchronization and live-preview engine."""

from style_engine.cache import CacheManager, CacheStats
from style_engine.engine import StyleEngine, build_engine
from style_engine.errors import (
    ImportFormatError,
    OptionRegistryError,
    PersistenceError,
    StyleEngineError,
)
from style_engine.extensions import ExtensionAPI, ExtensionRegistry, ExtensionRuntime
from style_engine.models import (
    EffectBinding,
    EffectKind,
    EngineSettings,
    OptionDescriptor,
    OptionType,
    SettingsSnapshot,
    load_settings,
)
from style_engine.options import OptionRegistry, load_option_catalog
from style_engine.permissions import AllowAllPermissions, PermissionChecker, StaticPermissions
from style_engine.presets import Preset, PresetLibrary
from style_engine.preview import LivePreviewDispatcher, RecordingRenderer, Renderer
from style_engine.sanitize import SanitizationPipeline, SanitizeResult, ValidationError
from style_engine.store import CommitResult, FailureKind, SettingsStore
from style_engine.stylesheet import StylesheetBuilder

__all__ = [
    "AllowAllPermissions",
    "CacheManager",
    "CacheStats",
    "CommitResult",
    "EffectBinding",
    "EffectKind",
    "EngineSettings",
    "ExtensionAPI",
    "ExtensionRegistry",
    "ExtensionRuntime",
    "FailureKind",
    "ImportFormatError",
    "LivePreviewDispatcher",
    "OptionDescriptor",
    "OptionRegistry",
    "OptionRegistryError",
    "OptionType",
    "PermissionChecker",
    "PersistenceError",
    "Preset",
    "PresetLibrary",
    "RecordingRenderer",
    "Renderer",
    "SanitizationPipeline",
    "SanitizeResult",
    "SettingsSnapshot",
    "SettingsStore",
    "StaticPermissions",
    "StyleEngine",
    "StyleEngineError",
    "StylesheetBuilder",
    "ValidationError",
    "build_engine",
    "load_option_catalog",
    "load_settings",
]
