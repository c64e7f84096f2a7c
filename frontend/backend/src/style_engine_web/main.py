"""Style Engine Web Backend - FastAPI application.

Routes cover:
- Option catalog and settings commit/import/export/reset
- Live preview edits
- Presets
- Extension and cache diagnostics
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from style_engine import OptionRegistryError, PersistenceError

from style_engine_web.dependencies import get_engine
from style_engine_web.routes import (
    diagnostics_router,
    presets_router,
    preview_router,
    settings_router,
)
from style_engine_web.services.request_context import (
    RequestContextFilter,
    request_id_middleware,
)


def _allowed_origins() -> list[str]:
    allowed = os.getenv("WEB_ALLOWED_ORIGINS")
    if allowed:
        return [origin.strip() for origin in allowed.split(",") if origin.strip()]
    web_origin = os.getenv("WEB_ORIGIN")
    return [web_origin] if web_origin else []


def _configure_logging() -> logging.Logger:
    formatter = logging.Formatter(
        "%(name)s - %(levelname)s - %(request_id)s - %(commit_id)s - %(message)s"
    )
    level = os.getenv("STYLE_ENGINE_LOG_LEVEL", "INFO").upper()
    for name in ("style_engine_web", "style_engine"):
        target = logging.getLogger(name)
        target.setLevel(level)
        if not target.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            handler.addFilter(RequestContextFilter())
            target.addHandler(handler)
    return logging.getLogger("style_engine_web")


logger = _configure_logging()

# Create FastAPI app
app = FastAPI(title="Style Engine Web Backend", version="1.0.0")
app.middleware("http")(request_id_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Build the engine early to surface configuration errors on boot."""
    logger.info("Starting Style Engine Web Backend...")
    try:
        engine = get_engine()
    except (OptionRegistryError, PersistenceError, ValueError) as e:
        logger.warning("Engine bootstrap failed: %s", e)
        return
    logger.info("Style Engine Web Backend ready at settings version %s", engine.store.version)


# Register routers
app.include_router(settings_router)
app.include_router(preview_router)
app.include_router(presets_router)
app.include_router(diagnostics_router)
