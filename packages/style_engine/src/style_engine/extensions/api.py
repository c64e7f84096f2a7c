"""Extension API handed to third-party extension factories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from style_engine.extensions.models import ExtensionPointKind
from style_engine.extensions.registry import DEFAULT_PRIORITY

if TYPE_CHECKING:
    from collections.abc import Callable

    from style_engine.extensions.registry import ExtensionRegistry


class ExtensionAPI:
    """Registration surface scoped to one named extension."""

    def __init__(self, name: str, registry: ExtensionRegistry) -> None:
        self._name = name
        self._registry = registry
        self.callback_ids: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        """Return the extension name."""
        return self._name

    def add_action(
        self, point_name: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> str:
        """Attach an action callback."""
        return self._register(point_name, ExtensionPointKind.ACTION, handler, priority)

    def add_filter(
        self, point_name: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> str:
        """Attach a filter callback."""
        return self._register(point_name, ExtensionPointKind.FILTER, handler, priority)

    def remove(self, point_name: str, callback_id: str) -> bool:
        """Detach a callback previously added through this API."""
        removed = self._registry.unregister(point_name, callback_id)
        if removed:
            self.callback_ids.remove((point_name, callback_id))
        return removed

    def _register(
        self,
        point_name: str,
        kind: ExtensionPointKind,
        handler: Callable[..., Any],
        priority: int,
    ) -> str:
        callback_id = self._registry.register(
            point_name, kind, handler, priority, owner=self._name
        )
        self.callback_ids.append((point_name, callback_id))
        return callback_id
