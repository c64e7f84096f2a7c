"""Apply effect bindings to the rendering collaborator."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from style_engine.extensions.points import EFFECT_APPLIED
from style_engine.models.options import EffectKind, OptionType
from style_engine.sanitize.validators import TRUE_STRINGS
from style_engine.utils import slugify

if TYPE_CHECKING:
    from collections.abc import Callable

    from style_engine.extensions.registry import ExtensionRegistry
    from style_engine.models.options import EffectBinding, OptionDescriptor
    from style_engine.preview.renderer import Renderer

logger = logging.getLogger(__name__)

VALUE_PLACEHOLDER = "{value}"


def is_enabled(value: Any) -> bool:
    """Interpret a raw control value as on/off."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def format_css_value(value: Any, unit: str = "") -> str:
    """Render a value for a CSS declaration, appending ``unit`` to numbers."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int | float):
        return f"{value:g}{unit}" if isinstance(value, float) else f"{value}{unit}"
    text = str(value).strip()
    if unit and text and _looks_numeric(text):
        return f"{text}{unit}"
    return text


def render_css_block(template: str, value: Any, unit: str = "") -> str | None:
    """Build the rule block for a ``rawCssBlock`` binding, or None to remove it."""
    if isinstance(value, bool):
        return template if value else None
    if value is None or value == "":
        return None
    rendered = format_css_value(value, unit)
    if VALUE_PLACEHOLDER in template:
        return template.replace(VALUE_PLACEHOLDER, rendered)
    return f"{template} {{ {rendered} }}"


def body_class_token(template: str, value: Any) -> str:
    """Resolve a class token, substituting a slug of the value when templated."""
    return template.replace(VALUE_PLACEHOLDER, slugify(str(value)))


def _looks_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


class EffectApplier:
    """Dispatch effect bindings to the renderer by kind."""

    def __init__(self, renderer: Renderer, extensions: ExtensionRegistry) -> None:
        self._renderer = renderer
        self._extensions = extensions
        self._class_tokens: dict[str, str] = {}
        self._lock = threading.Lock()
        self._handlers: dict[EffectKind, Callable[[str, EffectBinding, Any], None]] = {
            EffectKind.CSS_VARIABLE: self._apply_css_variable,
            EffectKind.BODY_CLASS: self._apply_body_class,
            EffectKind.RAW_CSS_BLOCK: self._apply_css_block,
            EffectKind.COMPONENT_REFRESH: self._apply_component_refresh,
        }

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    def apply(self, descriptor: OptionDescriptor, value: Any) -> bool:
        """Apply the descriptor's effect. Returns False when there is none or it failed."""
        effect = descriptor.effect
        if effect is None:
            return False
        if descriptor.type is OptionType.BOOLEAN:
            value = is_enabled(value)
        try:
            self._handlers[effect.kind](descriptor.key, effect, value)
        except Exception:  # noqa: BLE001 - a broken renderer must not stop editing
            logger.exception("Applying %s effect for %s failed", effect.kind.value, descriptor.key)
            return False
        self._extensions.invoke_action(EFFECT_APPLIED, descriptor.key, value, effect)
        return True

    def _apply_css_variable(self, key: str, effect: EffectBinding, value: Any) -> None:
        self._renderer.set_css_variable(effect.target, format_css_value(value, effect.unit))

    def _apply_body_class(self, key: str, effect: EffectBinding, value: Any) -> None:
        if VALUE_PLACEHOLDER not in effect.target:
            self._renderer.toggle_body_class(effect.target, is_enabled(value))
            return
        token = body_class_token(effect.target, value)
        with self._lock:
            previous = self._class_tokens.get(key)
            self._class_tokens[key] = token
        if previous and previous != token:
            self._renderer.toggle_body_class(previous, False)
        self._renderer.toggle_body_class(token, True)

    def _apply_css_block(self, key: str, effect: EffectBinding, value: Any) -> None:
        self._renderer.inject_css_block(key, render_css_block(effect.target, value, effect.unit))

    def _apply_component_refresh(self, key: str, effect: EffectBinding, value: Any) -> None:
        self._renderer.refresh_component(effect.target, key, value)
