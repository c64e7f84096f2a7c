"""Composition root wiring every engine component together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from style_engine.cache.manager import CacheManager
from style_engine.cache.tiers import MemoryTier, SQLiteCacheTier
from style_engine.extensions.points import CORE_EXTENSION_POINTS
from style_engine.extensions.registry import ExtensionRegistry
from style_engine.extensions.runtime import ExtensionRuntime
from style_engine.models.settings import load_settings
from style_engine.options.loader import load_option_catalog
from style_engine.presets import PresetLibrary
from style_engine.preview.dispatcher import LivePreviewDispatcher
from style_engine.preview.effects import EffectApplier
from style_engine.preview.renderer import RecordingRenderer
from style_engine.sanitize.pipeline import SanitizationPipeline
from style_engine.store.persistence import SQLitePersistence
from style_engine.store.store import SettingsStore
from style_engine.stylesheet import StylesheetBuilder

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from style_engine.cache.tiers import PersistentCacheTier
    from style_engine.extensions.runtime import ExtensionFactory
    from style_engine.models.settings import EngineSettings
    from style_engine.options.registry import OptionRegistry
    from style_engine.preview.renderer import Renderer
    from style_engine.preview.timers import TimerFactory
    from style_engine.store.models import CommitResult
    from style_engine.store.persistence import SettingsPersistence

logger = logging.getLogger(__name__)


@dataclass
class StyleEngine:
    """Handle on a fully wired engine."""

    settings: EngineSettings
    options: OptionRegistry
    extensions: ExtensionRegistry
    runtime: ExtensionRuntime
    pipeline: SanitizationPipeline
    store: SettingsStore
    cache: CacheManager
    renderer: Renderer
    applier: EffectApplier
    dispatcher: LivePreviewDispatcher
    stylesheet: StylesheetBuilder
    presets: PresetLibrary

    def commit(self, values: Mapping[str, Any]) -> CommitResult:
        """Commit values directly, bypassing the debounce buffer."""
        return self.store.commit(values)

    def import_snapshot(self, blob: str | bytes) -> CommitResult:
        """Import an export document and refresh bound controls on success."""
        result = self.store.import_snapshot(blob)
        if result.ok:
            self.dispatcher.refresh_all()
        return result

    def reset_to_defaults(self) -> CommitResult:
        """Reset every option and refresh bound controls."""
        return self.dispatcher.reset_to_defaults()

    def bind_option_controls(self) -> None:
        """Bind one control per option that has an effect, using the option key as id."""
        for descriptor in self.options.with_effects():
            self.dispatcher.bind(descriptor.key, descriptor.key)


def build_engine(
    settings: EngineSettings | None = None,
    *,
    persistence: SettingsPersistence | None = None,
    cache_tier: PersistentCacheTier | None = None,
    renderer: Renderer | None = None,
    timer_factory: TimerFactory | None = None,
    extensions: Iterable[tuple[str, ExtensionFactory]] = (),
) -> StyleEngine:
    """Build an engine from settings; SQLite collaborators are used unless overridden."""
    settings = settings or load_settings()
    options = load_option_catalog(settings.options_file)

    registry = ExtensionRegistry(CORE_EXTENSION_POINTS)
    runtime = ExtensionRuntime(registry)
    runtime.load_extensions(extensions)

    pipeline = SanitizationPipeline(options, registry)
    store = SettingsStore(
        options,
        pipeline,
        registry,
        persistence if persistence is not None else SQLitePersistence(settings.storage_path),
    )
    cache = CacheManager(
        registry,
        lambda: store.version,
        memory=MemoryTier(settings.cache_max_items, settings.cache_max_bytes),
        persistent=cache_tier if cache_tier is not None else SQLiteCacheTier(settings.storage_path),
    )
    store.attach_cache(cache)

    renderer = renderer if renderer is not None else RecordingRenderer()
    applier = EffectApplier(renderer, registry)
    dispatcher = LivePreviewDispatcher(
        store,
        options,
        applier,
        debounce_seconds=settings.debounce_seconds,
        timer_factory=timer_factory,
    )
    engine = StyleEngine(
        settings=settings,
        options=options,
        extensions=registry,
        runtime=runtime,
        pipeline=pipeline,
        store=store,
        cache=cache,
        renderer=renderer,
        applier=applier,
        dispatcher=dispatcher,
        stylesheet=StylesheetBuilder(options, store, cache, registry),
        presets=PresetLibrary(settings.presets_dir, pipeline, store),
    )
    logger.info(
        "Style engine ready: %d options, settings version %s", len(options), store.version
    )
    return engine
