from __future__ import annotations

from collections.abc import Callable

import pytest
from style_engine import EngineSettings, PersistenceError, SettingsSnapshot, build_engine
from style_engine.extensions import CORE_EXTENSION_POINTS, ExtensionRegistry
from style_engine.options import load_option_catalog
from style_engine.sanitize import SanitizationPipeline
from style_engine.store import InMemoryPersistence, SettingsStore

ENV_VARS = (
    "STYLE_ENGINE_DEBOUNCE_MS",
    "STYLE_ENGINE_CACHE_MAX_ITEMS",
    "STYLE_ENGINE_CACHE_MAX_BYTES",
    "STYLE_ENGINE_STORAGE_PATH",
    "STYLE_ENGINE_OPTIONS_FILE",
    "STYLE_ENGINE_PRESETS_DIR",
    "STYLE_ENGINE_LOG_LEVEL",
)


class ManualTimer:
    """Timer that only fires when a test says so."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[ManualTimer]:
        return [timer for timer in self.timers if not timer.cancelled and not timer.fired]

    def fire_all(self) -> None:
        for timer in list(self.active):
            timer.fire()


class FailingPersistence(InMemoryPersistence):
    """Persistence whose saves fail while ``failing`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = True

    def save(self, snapshot: SettingsSnapshot) -> None:
        if self.failing:
            msg = "disk full"
            raise PersistenceError(msg)
        super().save(snapshot)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def options():
    return load_option_catalog()


@pytest.fixture
def registry() -> ExtensionRegistry:
    return ExtensionRegistry(CORE_EXTENSION_POINTS)


@pytest.fixture
def pipeline(options, registry) -> SanitizationPipeline:
    return SanitizationPipeline(options, registry)


@pytest.fixture
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture
def store(options, pipeline, registry, persistence) -> SettingsStore:
    return SettingsStore(options, pipeline, registry, persistence)


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def engine_settings(tmp_path) -> EngineSettings:
    return EngineSettings(
        storage_path=str(tmp_path / "style_engine.db"),
        presets_dir=str(tmp_path / "presets"),
    )


@pytest.fixture
def engine(engine_settings, timers):
    from style_engine.cache import InMemoryCacheTier

    return build_engine(
        engine_settings,
        persistence=InMemoryPersistence(),
        cache_tier=InMemoryCacheTier(),
        timer_factory=timers,
    )


@pytest.fixture
def failing_persistence() -> FailingPersistence:
    return FailingPersistence()
