"""Permission collaborators consulted before settings are modified."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable


class PermissionChecker(Protocol):
    def can_modify_settings(self, actor: str | None) -> bool: ...


class AllowAllPermissions:
    """Grant every actor, including anonymous ones."""

    def can_modify_settings(self, actor: str | None) -> bool:
        return True


class StaticPermissions:
    """Grant a fixed set of actors."""

    def __init__(self, actors: Iterable[str]) -> None:
        self._actors = frozenset(actor.strip() for actor in actors if actor.strip())

    @property
    def actors(self) -> frozenset[str]:
        return self._actors

    def can_modify_settings(self, actor: str | None) -> bool:
        return actor is not None and actor.strip() in self._actors
