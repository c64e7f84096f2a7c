"""Catalog of option descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from style_engine.errors import OptionRegistryError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from style_engine.models.options import OptionDescriptor


class OptionRegistry:
    """Registry of option descriptors keyed by option key.

    Descriptors are loaded once at startup; ``freeze`` rejects later registrations.
    """

    def __init__(self, descriptors: Iterable[OptionDescriptor] = ()) -> None:
        self._options: dict[str, OptionDescriptor] = {}
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: OptionDescriptor) -> None:
        """Register a descriptor."""
        if self._frozen:
            message = f"Option registry is frozen; cannot register {descriptor.key}"
            raise OptionRegistryError(message)
        if descriptor.key in self._options:
            message = f"Option already registered: {descriptor.key}"
            raise OptionRegistryError(message)
        self._options[descriptor.key] = descriptor

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether registrations are closed."""
        return self._frozen

    def get(self, key: str) -> OptionDescriptor | None:
        """Get a descriptor by key."""
        return self._options.get(key)

    def keys(self) -> list[str]:
        """Return option keys in registration order."""
        return list(self._options)

    def defaults(self) -> dict[str, Any]:
        """Return the default value of every option."""
        return {key: descriptor.default for key, descriptor in self._options.items()}

    def with_effects(self) -> list[OptionDescriptor]:
        """Return descriptors that carry an effect binding."""
        return [descriptor for descriptor in self._options.values() if descriptor.effect]

    def list(self) -> list[dict[str, Any]]:
        """List descriptors as JSON-compatible dicts."""
        return [descriptor.to_dict() for descriptor in self._options.values()]

    def __contains__(self, key: object) -> bool:
        return key in self._options

    def __iter__(self) -> Iterator[OptionDescriptor]:
        return iter(list(self._options.values()))

    def __len__(self) -> int:
        return len(self._options)
