from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from style_engine import AllowAllPermissions, EngineSettings, build_engine
from style_engine.cache import InMemoryCacheTier
from style_engine.store import InMemoryPersistence
from style_engine_web.dependencies import get_engine, get_permissions
from style_engine_web.main import app


class HeldTimer:
    """Debounce timer that never fires on its own."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(
        EngineSettings(
            storage_path=str(tmp_path / "test.db"),
            presets_dir=str(tmp_path / "presets"),
        ),
        persistence=InMemoryPersistence(),
        cache_tier=InMemoryCacheTier(),
        timer_factory=HeldTimer,
    )
    engine.bind_option_controls()
    return engine


@pytest.fixture
def client(engine) -> TestClient:
    """Create a test client with an isolated engine."""
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_permissions] = AllowAllPermissions

    yield TestClient(app)

    # Clean up override after test
    app.dependency_overrides.clear()
