"""Extension runtime for loading third-party extensions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from style_engine.extensions.api import ExtensionAPI
from style_engine.extensions.models import ExtensionError
from style_engine.extensions.registry import ExtensionRegistry
from style_engine.utils import utc_timestamp

logger = logging.getLogger(__name__)

ExtensionFactory = Callable[[ExtensionAPI], None]


class ExtensionRuntime:
    """Loads extensions against a shared registry."""

    def __init__(self, registry: ExtensionRegistry) -> None:
        self._registry = registry
        self._loaded: dict[str, ExtensionAPI] = {}

    @property
    def registry(self) -> ExtensionRegistry:
        """Return the backing registry."""
        return self._registry

    @property
    def loaded(self) -> list[str]:
        """Return names of successfully loaded extensions."""
        return list(self._loaded)

    def load_extensions(self, factories: Iterable[tuple[str, ExtensionFactory]]) -> None:
        """Load extensions from the provided factories.

        A factory that raises is recorded as an extension error and its partial
        registrations are rolled back.
        """
        for name, factory in factories:
            api = ExtensionAPI(name=name, registry=self._registry)
            try:
                factory(api)
            except Exception as exc:  # noqa: BLE001 - extension isolation
                logger.exception("Extension '%s' failed to load", name)
                for point_name, callback_id in list(api.callback_ids):
                    api.remove(point_name, callback_id)
                self._registry.errors.append(
                    ExtensionError(
                        extension_point_name="<load>",
                        callback_id="",
                        handler_name=name,
                        message=str(exc),
                        occurred_at=utc_timestamp(),
                    )
                )
                continue
            self._loaded[name] = api

    def unload(self, name: str) -> bool:
        """Detach every callback an extension registered."""
        api = self._loaded.pop(name, None)
        if api is None:
            return False
        for point_name, callback_id in list(api.callback_ids):
            api.remove(point_name, callback_id)
        return True
