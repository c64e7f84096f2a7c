"""Stylesheet derived from the current settings snapshot."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from style_engine.cache.keys import fingerprint
from style_engine.extensions.points import STYLESHEET_GENERATED
from style_engine.models.options import EffectKind
from style_engine.preview.effects import (
    VALUE_PLACEHOLDER,
    body_class_token,
    format_css_value,
    is_enabled,
    render_css_block,
)

if TYPE_CHECKING:
    from style_engine.cache.manager import CacheManager
    from style_engine.extensions.registry import ExtensionRegistry
    from style_engine.models.snapshot import SettingsSnapshot
    from style_engine.options.registry import OptionRegistry
    from style_engine.store.store import SettingsStore

logger = logging.getLogger(__name__)

MASTER_SWITCH = "enable_plugin"


class StylesheetBuilder:
    """Render CSS for every cssVariable and rawCssBlock binding, cached per snapshot."""

    def __init__(
        self,
        options: OptionRegistry,
        store: SettingsStore,
        cache: CacheManager,
        extensions: ExtensionRegistry,
    ) -> None:
        self._options = options
        self._store = store
        self._cache = cache
        self._extensions = extensions

    def cache_key(self, snapshot: SettingsSnapshot) -> str:
        """Fingerprint of the values the stylesheet depends on."""
        return fingerprint("stylesheet", dict(snapshot.values))

    def enabled(self, snapshot: SettingsSnapshot | None = None) -> bool:
        """Whether styles apply. Catalogs without the master switch are always on."""
        if self._options.get(MASTER_SWITCH) is None:
            return True
        snapshot = snapshot or self._store.get_snapshot()
        return is_enabled(snapshot.get(MASTER_SWITCH))

    def build(self) -> str:
        """Return the stylesheet for the current snapshot, empty when switched off."""
        snapshot = self._store.get_snapshot()
        if not self.enabled(snapshot):
            return ""
        css = self._cache.remember(
            self.cache_key(snapshot),
            lambda: self._render(snapshot).encode("utf-8"),
            generation=snapshot.version,
        )
        return css.decode("utf-8")

    def body_classes(self) -> list[str]:
        """Class tokens active for the current snapshot."""
        snapshot = self._store.get_snapshot()
        if not self.enabled(snapshot):
            return []
        tokens: list[str] = []
        for descriptor in self._options.with_effects():
            effect = descriptor.effect
            if effect is None or effect.kind is not EffectKind.BODY_CLASS:
                continue
            value = snapshot.get(descriptor.key)
            if VALUE_PLACEHOLDER in effect.target:
                if value not in (None, ""):
                    tokens.append(body_class_token(effect.target, value))
            elif is_enabled(value):
                tokens.append(effect.target)
        return tokens

    def _render(self, snapshot: SettingsSnapshot) -> str:
        declarations: list[str] = []
        blocks: list[str] = []
        for descriptor in self._options.with_effects():
            effect = descriptor.effect
            if effect is None:
                continue
            value = snapshot.get(descriptor.key)
            if effect.kind is EffectKind.CSS_VARIABLE:
                rendered = format_css_value(value, effect.unit)
                if rendered:
                    declarations.append(f"  {effect.target}: {rendered};")
            elif effect.kind is EffectKind.RAW_CSS_BLOCK:
                block = render_css_block(effect.target, value, effect.unit)
                if block:
                    blocks.append(f"/* {descriptor.key} */\n{block}")
        parts = []
        if declarations:
            parts.append(":root {\n" + "\n".join(declarations) + "\n}")
        parts.extend(blocks)
        css = "\n\n".join(parts) + ("\n" if parts else "")
        filtered = self._extensions.apply_filter(STYLESHEET_GENERATED, css, snapshot)
        if not isinstance(filtered, str):
            logger.warning("Ignoring %s result of type %s", STYLESHEET_GENERATED, type(filtered))
            return css
        logger.debug("Generated stylesheet for version %s (%d bytes)", snapshot.version, len(css))
        return filtered
