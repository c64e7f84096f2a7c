"""Live preview: effect application and debounced commits."""

from style_engine.preview.dispatcher import DEFAULT_DEBOUNCE_SECONDS, LivePreviewDispatcher
from style_engine.preview.effects import (
    EffectApplier,
    body_class_token,
    format_css_value,
    render_css_block,
)
from style_engine.preview.renderer import RecordingRenderer, Renderer
from style_engine.preview.timers import Cancellable, TimerFactory, thread_timer

__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "Cancellable",
    "EffectApplier",
    "LivePreviewDispatcher",
    "RecordingRenderer",
    "Renderer",
    "TimerFactory",
    "body_class_token",
    "format_css_value",
    "render_css_block",
    "thread_timer",
]
