"""Rendering collaborator that receives live preview effects."""

from __future__ import annotations

import threading
from typing import Any, Protocol


class Renderer(Protocol):
    """UI layer hosting the live preview."""

    def set_css_variable(self, name: str, value: str) -> None: ...

    def toggle_body_class(self, token: str, enabled: bool) -> None: ...

    def inject_css_block(self, block_id: str, css: str | None) -> None:
        """Insert or replace a rule block; ``None`` removes it."""
        ...

    def refresh_component(self, component: str, option_key: str, value: Any) -> None: ...


class RecordingRenderer:
    """Headless renderer that keeps the resulting live state in memory."""

    def __init__(self) -> None:
        self.css_variables: dict[str, str] = {}
        self.body_classes: set[str] = set()
        self.css_blocks: dict[str, str] = {}
        self.refreshes: list[tuple[str, str, Any]] = []
        self._lock = threading.Lock()

    def set_css_variable(self, name: str, value: str) -> None:
        with self._lock:
            self.css_variables[name] = value

    def toggle_body_class(self, token: str, enabled: bool) -> None:
        with self._lock:
            if enabled:
                self.body_classes.add(token)
            else:
                self.body_classes.discard(token)

    def inject_css_block(self, block_id: str, css: str | None) -> None:
        with self._lock:
            if css is None:
                self.css_blocks.pop(block_id, None)
            else:
                self.css_blocks[block_id] = css

    def refresh_component(self, component: str, option_key: str, value: Any) -> None:
        with self._lock:
            self.refreshes.append((component, option_key, value))

    def state(self) -> dict[str, Any]:
        """Return a JSON-compatible copy of the live state."""
        with self._lock:
            return {
                "css_variables": dict(self.css_variables),
                "body_classes": sorted(self.body_classes),
                "css_blocks": dict(self.css_blocks),
                "refresh_count": len(self.refreshes),
            }
