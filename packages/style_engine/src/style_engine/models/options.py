"""Option descriptors and the effect bindings attached to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OptionType(str, Enum):
    """Value type of a registered option."""

    COLOR = "color"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"
    CHOICE = "choice"
    FREEFORM_CSS = "freeformCss"


class EffectKind(str, Enum):
    """Kind of live visual effect an option drives."""

    CSS_VARIABLE = "cssVariable"
    BODY_CLASS = "bodyClass"
    RAW_CSS_BLOCK = "rawCssBlock"
    COMPONENT_REFRESH = "componentRefresh"


@dataclass(frozen=True)
class EffectBinding:
    """Maps an option to an immediately-applicable visual effect.

    ``target`` is a custom-property name for ``cssVariable``, a class token for
    ``bodyClass``, a selector/rule template for ``rawCssBlock``, and a renderer
    name for ``componentRefresh``. Templates may contain a ``{value}`` placeholder.
    """

    kind: EffectKind
    target: str
    unit: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", EffectKind(self.kind))
        if not self.target.strip():
            msg = "EffectBinding.target must be non-empty"
            raise ValueError(msg)
        if self.kind is EffectKind.CSS_VARIABLE and not self.target.startswith("--"):
            msg = f"CSS variable target must start with '--': {self.target}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Convert binding to a JSON-compatible dict."""
        return {"kind": self.kind.value, "target": self.target, "unit": self.unit}


@dataclass(frozen=True)
class OptionDescriptor:
    """Static metadata for one option: type, default, validation bounds, effect."""

    key: str
    type: OptionType
    default: Any = None
    effect: EffectBinding | None = None
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] = ()
    max_length: int | None = None
    validator: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.key.strip():
            msg = "OptionDescriptor.key must be non-empty"
            raise ValueError(msg)
        object.__setattr__(self, "type", OptionType(self.type))
        object.__setattr__(self, "choices", tuple(str(choice) for choice in self.choices))
        if self.type is OptionType.CHOICE:
            if not self.choices:
                msg = f"Choice option '{self.key}' requires at least one choice"
                raise ValueError(msg)
            if self.default not in self.choices:
                msg = f"Default for '{self.key}' is not one of its choices"
                raise ValueError(msg)
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            msg = f"Option '{self.key}' has minimum greater than maximum"
            raise ValueError(msg)

    @property
    def validator_name(self) -> str:
        """Name of the validator applied to this option."""
        return self.validator or self.type.value

    def to_dict(self) -> dict[str, Any]:
        """Convert descriptor to a JSON-compatible dict."""
        return {
            "key": self.key,
            "type": self.type.value,
            "default": self.default,
            "effect": self.effect.to_dict() if self.effect else None,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "choices": list(self.choices),
            "max_length": self.max_length,
            "description": self.description,
        }
