"""Extension point models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


class ExtensionPointKind(str, Enum):
    """Whether a point runs side effects or transforms a value."""

    ACTION = "action"
    FILTER = "filter"


@dataclass(frozen=True)
class RegisteredCallback:
    """Callback attached to an extension point."""

    id: str
    priority: int
    sequence: int
    handler: Callable[..., Any]
    owner: str = ""

    @property
    def sort_key(self) -> tuple[int, int]:
        """Ascending priority, ties broken by registration order."""
        return (self.priority, self.sequence)


@dataclass
class ExtensionPoint:
    """Named hook with its callbacks kept in execution order."""

    name: str
    kind: ExtensionPointKind
    callbacks: list[RegisteredCallback] = field(default_factory=list)


@dataclass(frozen=True)
class ExtensionPointSpec:
    """Documentation for an extension point the engine invokes."""

    name: str
    kind: ExtensionPointKind
    description: str
    parameters: tuple[str, ...] = ()
    returns: str = ""


@dataclass(frozen=True)
class ExecutionStat:
    """Invocation telemetry for one extension point."""

    extension_point_name: str
    invocation_count: int
    total_duration_nanos: int
    last_invoked_at: str

    @property
    def average_duration_nanos(self) -> float:
        """Mean duration per invocation."""
        if not self.invocation_count:
            return 0.0
        return self.total_duration_nanos / self.invocation_count

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["average_duration_nanos"] = self.average_duration_nanos
        return data


@dataclass(frozen=True)
class ExtensionError:
    """Captured extension callback failure."""

    extension_point_name: str
    callback_id: str
    handler_name: str
    message: str
    occurred_at: str
