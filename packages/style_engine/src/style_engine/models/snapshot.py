"""Immutable settings snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class SettingsSnapshot:
    """Complete, read-only view of option values at one version.

    ``values`` is copied into a read-only mapping so a reader holding an older
    snapshot never observes later commits.
    """

    version: int
    values: Mapping[str, Any]
    updated_at: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, key: str, default: Any = None) -> Any:
        """Return a single value."""
        return self.values.get(key, default)
