"""Routes package for the style engine web API."""

from style_engine_web.routes.diagnostics import router as diagnostics_router
from style_engine_web.routes.presets import router as presets_router
from style_engine_web.routes.preview import router as preview_router
from style_engine_web.routes.settings import router as settings_router

__all__ = ["diagnostics_router", "presets_router", "preview_router", "settings_router"]
