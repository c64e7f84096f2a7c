"""FastAPI dependency injection for the engine and its collaborators.

Engine and permission checker are cached singletons so tests can swap them
through ``app.dependency_overrides``.
"""

from __future__ import annotations

import os
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from style_engine import (
    AllowAllPermissions,
    PermissionChecker,
    StaticPermissions,
    StyleEngine,
    build_engine,
    load_settings,
)

_actor_header = Header(default=None, alias="X-Actor")


@lru_cache
def get_engine() -> StyleEngine:
    """Get the StyleEngine instance (cached singleton)."""
    engine = build_engine(load_settings())
    engine.bind_option_controls()
    return engine


@lru_cache
def get_permissions() -> PermissionChecker:
    """Build the permission checker from ``STYLE_ENGINE_ALLOWED_ACTORS``.

    An unset or empty variable allows every actor.
    """
    allowed = os.getenv("STYLE_ENGINE_ALLOWED_ACTORS", "")
    actors = [actor.strip() for actor in allowed.split(",") if actor.strip()]
    if actors:
        return StaticPermissions(actors)
    return AllowAllPermissions()


def get_actor(x_actor: str | None = _actor_header) -> str | None:
    """Return the acting user from the ``X-Actor`` header."""
    return x_actor.strip() if x_actor else None


_actor_dep = Depends(get_actor)
_permissions_dep = Depends(get_permissions)


def require_modify_permission(
    actor: str | None = _actor_dep,
    permissions: PermissionChecker = _permissions_dep,
) -> str | None:
    """Reject the request unless the actor may modify settings."""
    if not permissions.can_modify_settings(actor):
        raise HTTPException(status_code=403, detail="Actor may not modify settings")
    return actor
