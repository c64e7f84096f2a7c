"""Live preview dispatcher: immediate effects, debounced commits."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from style_engine.preview.timers import thread_timer

if TYPE_CHECKING:
    from collections.abc import Callable

    from style_engine.models.options import EffectBinding
    from style_engine.options.registry import OptionRegistry
    from style_engine.preview.effects import EffectApplier
    from style_engine.preview.timers import Cancellable, TimerFactory
    from style_engine.store.models import CommitResult
    from style_engine.store.store import SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class LivePreviewDispatcher:
    """Bind UI controls to options and coalesce edits into commits.

    Each edit is applied to the renderer at once and buffered. When no edit has
    arrived for ``debounce_seconds`` the buffer is committed as one batch. At most
    one flush runs at a time; edits that arrive during a flush start a new
    debounce cycle once it resolves.
    """

    def __init__(
        self,
        store: SettingsStore,
        options: OptionRegistry,
        applier: EffectApplier,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: TimerFactory | None = None,
        on_result: Callable[[CommitResult], None] | None = None,
    ) -> None:
        if debounce_seconds < 0:
            msg = "debounce_seconds must not be negative"
            raise ValueError(msg)
        self._store = store
        self._options = options
        self._applier = applier
        self._debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory or thread_timer
        self._on_result = on_result
        self._bindings: dict[str, str] = {}
        self._pending: dict[str, Any] = {}
        self._lock = threading.RLock()
        self._timer: Cancellable | None = None
        self._timer_token = 0
        self._epoch = 0
        self._flushing = False
        self._rearm = False
        self._last_result: CommitResult | None = None

    @property
    def debounce_seconds(self) -> float:
        return self._debounce_seconds

    @property
    def bindings(self) -> dict[str, str]:
        """Control id to option key."""
        with self._lock:
            return dict(self._bindings)

    @property
    def pending(self) -> dict[str, Any]:
        """Buffered edits not yet committed."""
        with self._lock:
            return dict(self._pending)

    @property
    def last_result(self) -> CommitResult | None:
        """Outcome of the most recent flush."""
        return self._last_result

    def bind(self, control_id: str, option_key: str) -> EffectBinding | None:
        """Associate a control with an option and return the option's effect."""
        descriptor = self._options.get(option_key)
        if descriptor is None:
            msg = f"Unknown option: {option_key}"
            raise KeyError(msg)
        with self._lock:
            self._bindings[control_id] = option_key
        return descriptor.effect

    def unbind(self, control_id: str) -> bool:
        """Forget a control. Returns whether it was bound."""
        with self._lock:
            return self._bindings.pop(control_id, None) is not None

    def on_control_changed(self, control_id: str, raw_value: Any) -> None:
        """Apply the effect immediately and schedule a debounced commit."""
        with self._lock:
            option_key = self._bindings.get(control_id)
        if option_key is None:
            msg = f"Control is not bound: {control_id}"
            raise KeyError(msg)
        descriptor = self._options.get(option_key)
        if descriptor is not None:
            self._applier.apply(descriptor, raw_value)
        with self._lock:
            self._pending[option_key] = raw_value
            if self._flushing:
                self._rearm = True
            else:
                self._arm()

    def flush(self) -> CommitResult | None:
        """Commit the buffered edits now. Returns None when there was nothing to do."""
        with self._lock:
            if self._flushing:
                self._rearm = True
                return None
            if not self._pending:
                return None
            batch = dict(self._pending)
            self._pending.clear()
            self._cancel_timer()
            self._flushing = True
            epoch = self._epoch

        try:
            result = self._store.commit(batch)
        finally:
            with self._lock:
                self._flushing = False
                cancelled = epoch != self._epoch
                edited_since = set(self._pending)
                rearm = self._rearm or bool(self._pending)
                self._rearm = False

        if not cancelled:
            if not result.ok:
                logger.info(
                    "Preview commit failed (%s); reverting %d key(s)",
                    result.failure.value if result.failure else "unknown",
                    len(set(batch) - edited_since),
                )
                self._revert(key for key in batch if key not in edited_since)
            self._last_result = result
            self._notify(result)
        if rearm:
            with self._lock:
                if self._pending and not self._flushing:
                    self._arm()
        return result

    def cancel_pending(self) -> None:
        """Drop buffered edits and detach any in-flight flush from the buffer."""
        with self._lock:
            self._pending.clear()
            self._cancel_timer()
            self._epoch += 1
            self._rearm = False

    def refresh_all(self) -> dict[str, Any]:
        """Re-apply every bound effect from the current snapshot."""
        self.cancel_pending()
        snapshot = self._store.get_snapshot()
        applied: dict[str, Any] = {}
        for control_id, option_key in self.bindings.items():
            descriptor = self._options.get(option_key)
            value = snapshot.get(option_key)
            if descriptor is not None:
                self._applier.apply(descriptor, value)
            applied[control_id] = value
        return applied

    def reset_to_defaults(self) -> CommitResult:
        """Cancel pending edits, reset the store and refresh every control."""
        self.cancel_pending()
        result = self._store.reset_to_defaults()
        self.refresh_all()
        return result

    def _arm(self) -> None:
        self._cancel_timer()
        self._timer_token += 1
        token = self._timer_token
        self._timer = self._timer_factory(self._debounce_seconds, lambda: self._expire(token))

    def _expire(self, token: int) -> None:
        with self._lock:
            if token != self._timer_token:
                return
            self._timer = None
        self.flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._timer_token += 1

    def _revert(self, keys: Any) -> None:
        snapshot = self._store.get_snapshot()
        for key in keys:
            descriptor = self._options.get(key)
            if descriptor is not None:
                self._applier.apply(descriptor, snapshot.get(key))

    def _notify(self, result: CommitResult) -> None:
        if self._on_result is None:
            return
        try:
            self._on_result(result)
        except Exception:  # noqa: BLE001 - result listeners are caller code
            logger.exception("Preview result listener failed")
