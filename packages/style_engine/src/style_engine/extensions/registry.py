"""Extension point registry with ordered, fail-soft execution."""

from __future__ import annotations

import bisect
import itertools
import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from style_engine.extensions.models import (
    ExecutionStat,
    ExtensionError,
    ExtensionPoint,
    ExtensionPointKind,
    ExtensionPointSpec,
    RegisteredCallback,
)
from style_engine.utils import utc_timestamp

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10
MAX_RECORDED_ERRORS = 200

Handler = Callable[..., Any]


def handler_name(handler: Handler) -> str:
    """Return a readable name for a callback."""
    qualname = getattr(handler, "__qualname__", None)
    if qualname:
        module = getattr(handler, "__module__", None)
        return f"{module}.{qualname}" if module else qualname
    return type(handler).__name__


class ExtensionRegistry:
    """Register callbacks on named extension points and run them in priority order.

    Callbacks run sequentially on the caller's thread. A callback that raises is
    recorded in ``errors`` and skipped; it never stops the chain or reaches the caller.
    """

    def __init__(self, declared: Iterable[ExtensionPointSpec] = ()) -> None:
        self._points: dict[str, ExtensionPoint] = {}
        self._declared: dict[str, ExtensionPointSpec] = {spec.name: spec for spec in declared}
        self._stats: dict[str, ExecutionStat] = {}
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()
        self.errors: list[ExtensionError] = []

    def register(
        self,
        point_name: str,
        kind: ExtensionPointKind | str,
        handler: Handler,
        priority: int = DEFAULT_PRIORITY,
        *,
        owner: str = "",
    ) -> str:
        """Attach a callback, creating the point on first use. Returns the callback id."""
        kind = ExtensionPointKind(kind)
        with self._lock:
            point = self._points.get(point_name)
            if point is None:
                declared = self._declared.get(point_name)
                if declared is not None and declared.kind is not kind:
                    msg = f"Extension point {point_name} is a {declared.kind.value}, not a {kind.value}"
                    raise ValueError(msg)
                point = ExtensionPoint(name=point_name, kind=kind)
                self._points[point_name] = point
            elif point.kind is not kind:
                msg = f"Extension point {point_name} is a {point.kind.value}, not a {kind.value}"
                raise ValueError(msg)
            sequence = next(self._sequence)
            callback = RegisteredCallback(
                id=f"{point_name}:{sequence}",
                priority=int(priority),
                sequence=sequence,
                handler=handler,
                owner=owner,
            )
            bisect.insort(point.callbacks, callback, key=lambda item: item.sort_key)
        logger.debug("Registered %s on %s (priority %s)", callback.id, point_name, priority)
        return callback.id

    def add_action(self, point_name: str, handler: Handler, priority: int = DEFAULT_PRIORITY) -> str:
        """Shorthand for registering an action callback."""
        return self.register(point_name, ExtensionPointKind.ACTION, handler, priority)

    def add_filter(self, point_name: str, handler: Handler, priority: int = DEFAULT_PRIORITY) -> str:
        """Shorthand for registering a filter callback."""
        return self.register(point_name, ExtensionPointKind.FILTER, handler, priority)

    def unregister(self, point_name: str, callback_id: str) -> bool:
        """Remove a callback. Returns whether one was found."""
        with self._lock:
            point = self._points.get(point_name)
            if point is None:
                return False
            for index, callback in enumerate(point.callbacks):
                if callback.id == callback_id:
                    del point.callbacks[index]
                    return True
        return False

    def clear(self, point_name: str) -> None:
        """Empty an extension point. Points are never deleted."""
        with self._lock:
            point = self._points.get(point_name)
            if point is not None:
                point.callbacks.clear()

    def invoke_action(self, point_name: str, *args: Any) -> None:
        """Run every callback for an action point in priority order."""
        started = time.perf_counter_ns()
        for callback in self._ordered(point_name):
            try:
                callback.handler(*args)
            except Exception as exc:  # noqa: BLE001 - callbacks are isolated
                self._record_error(point_name, callback, exc)
        self._record_stat(point_name, time.perf_counter_ns() - started)

    def apply_filter(self, point_name: str, value: Any, *args: Any) -> Any:
        """Thread a value through every filter callback and return the result."""
        started = time.perf_counter_ns()
        current = value
        for callback in self._ordered(point_name):
            try:
                current = callback.handler(current, *args)
            except Exception as exc:  # noqa: BLE001 - callbacks are isolated
                self._record_error(point_name, callback, exc)
        self._record_stat(point_name, time.perf_counter_ns() - started)
        return current

    def has_callbacks(self, point_name: str) -> bool:
        """Check whether any callback is attached to a point."""
        with self._lock:
            point = self._points.get(point_name)
            return bool(point and point.callbacks)

    def get_callbacks(self, point_name: str) -> list[dict[str, Any]]:
        """Describe callbacks attached to a point, in execution order."""
        return [
            {
                "id": callback.id,
                "priority": callback.priority,
                "handler": handler_name(callback.handler),
                "owner": callback.owner,
            }
            for callback in self._ordered(point_name)
        ]

    def point_names(self) -> list[str]:
        """Return declared and registered point names."""
        with self._lock:
            return sorted(set(self._declared) | set(self._points))

    def describe(self) -> dict[str, dict[str, Any]]:
        """Return documentation for every known extension point."""
        documentation: dict[str, dict[str, Any]] = {}
        for name in self.point_names():
            spec = self._declared.get(name)
            with self._lock:
                point = self._points.get(name)
            kind = spec.kind if spec else point.kind  # type: ignore[union-attr]
            documentation[name] = {
                "name": name,
                "kind": kind.value,
                "description": spec.description if spec else "",
                "parameters": list(spec.parameters) if spec else [],
                "returns": spec.returns if spec else "",
                "declared": spec is not None,
                "has_callbacks": self.has_callbacks(name),
                "callbacks": self.get_callbacks(name),
            }
        return documentation

    def get_stats(self) -> dict[str, ExecutionStat]:
        """Return execution stats keyed by point name."""
        with self._lock:
            return dict(self._stats)

    def clear_stats(self) -> None:
        """Reset all execution stats."""
        with self._lock:
            self._stats.clear()

    def stats_summary(self) -> dict[str, Any]:
        """Aggregate execution stats for diagnostics."""
        stats = self.get_stats()
        if not stats:
            return {
                "total_executions": 0,
                "total_duration_nanos": 0,
                "most_used": None,
                "slowest": None,
            }
        most_used = max(stats.values(), key=lambda stat: stat.invocation_count)
        slowest = max(stats.values(), key=lambda stat: stat.average_duration_nanos)
        return {
            "total_executions": sum(stat.invocation_count for stat in stats.values()),
            "total_duration_nanos": sum(stat.total_duration_nanos for stat in stats.values()),
            "most_used": most_used.extension_point_name,
            "slowest": slowest.extension_point_name,
        }

    def _ordered(self, point_name: str) -> list[RegisteredCallback]:
        with self._lock:
            point = self._points.get(point_name)
            return list(point.callbacks) if point else []

    def _record_stat(self, point_name: str, duration_nanos: int) -> None:
        with self._lock:
            previous = self._stats.get(point_name)
            self._stats[point_name] = ExecutionStat(
                extension_point_name=point_name,
                invocation_count=(previous.invocation_count if previous else 0) + 1,
                total_duration_nanos=(previous.total_duration_nanos if previous else 0)
                + max(0, duration_nanos),
                last_invoked_at=utc_timestamp(),
            )

    def _record_error(self, point_name: str, callback: RegisteredCallback, exc: Exception) -> None:
        name = handler_name(callback.handler)
        logger.error(
            "Extension callback %s (%s) failed on %s: %s",
            callback.id,
            name,
            point_name,
            exc,
            exc_info=exc,
        )
        with self._lock:
            self.errors.append(
                ExtensionError(
                    extension_point_name=point_name,
                    callback_id=callback.id,
                    handler_name=name,
                    message=str(exc),
                    occurred_at=utc_timestamp(),
                )
            )
            if len(self.errors) > MAX_RECORDED_ERRORS:
                del self.errors[: len(self.errors) - MAX_RECORDED_ERRORS]
