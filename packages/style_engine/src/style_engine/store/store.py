"""Single-writer settings store with a copy-on-write snapshot."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from style_engine.errors import ImportFormatError, PersistenceError
from style_engine.extensions.points import AFTER_COMMIT, AFTER_IMPORT, AFTER_RESET, BEFORE_COMMIT
from style_engine.models.snapshot import SettingsSnapshot
from style_engine.store.export import build_export, parse_export
from style_engine.store.models import CommitResult, CommitState, FailureKind
from style_engine.store.persistence import InMemoryPersistence
from style_engine.telemetry.context import commit_context
from style_engine.utils import utc_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping

    from style_engine.cache.manager import CacheManager
    from style_engine.extensions.registry import ExtensionRegistry
    from style_engine.options.registry import OptionRegistry
    from style_engine.sanitize.pipeline import SanitizationPipeline
    from style_engine.store.persistence import SettingsPersistence

logger = logging.getLogger(__name__)


class SettingsStore:
    """Own the current ``SettingsSnapshot`` and the commit protocol.

    Commits are serialized by a lock so versions increase by exactly one per
    successful commit. Readers never take the lock: ``get_snapshot`` returns the
    current immutable snapshot object.
    """

    def __init__(
        self,
        options: OptionRegistry,
        pipeline: SanitizationPipeline,
        extensions: ExtensionRegistry,
        persistence: SettingsPersistence | None = None,
    ) -> None:
        self._options = options
        self._pipeline = pipeline
        self._extensions = extensions
        self._persistence = persistence or InMemoryPersistence()
        self._cache: CacheManager | None = None
        self._lock = threading.Lock()
        self._state = CommitState.IDLE
        self._snapshot = self._load_initial()

    def attach_cache(self, cache: CacheManager) -> None:
        """Register the cache invalidated after each commit."""
        self._cache = cache

    @property
    def version(self) -> int:
        """Version of the current snapshot."""
        return self._snapshot.version

    @property
    def state(self) -> CommitState:
        """Commit phase; ``idle`` when no commit is running."""
        return self._state

    def get_snapshot(self) -> SettingsSnapshot:
        """Return the current snapshot."""
        return self._snapshot

    def commit(self, raw_input: Mapping[str, Any]) -> CommitResult:
        """Validate, persist and publish a batch of values."""
        with self._lock, commit_context():
            return self._commit_locked(raw_input)

    def export_snapshot(self) -> str:
        """Serialize the current snapshot as a versioned JSON document."""
        return build_export(self._snapshot)

    def import_snapshot(self, blob: str | bytes) -> CommitResult:
        """Commit the values of an export document through the normal commit path."""
        try:
            document = parse_export(blob)
        except ImportFormatError as exc:
            logger.warning("Import rejected: %s", exc)
            return CommitResult.failed(FailureKind.IMPORT_FORMAT, str(exc))
        result = self.commit(document.values)
        if result.ok:
            self._extensions.invoke_action(AFTER_IMPORT, result.snapshot, document)
        return result

    def reset_to_defaults(self) -> CommitResult:
        """Commit every option's default value."""
        result = self.commit(self._options.defaults())
        if result.ok:
            self._extensions.invoke_action(AFTER_RESET, result.snapshot)
        return result

    def _commit_locked(self, raw_input: Mapping[str, Any]) -> CommitResult:
        current = self._snapshot
        self._state = CommitState.VALIDATING
        try:
            sanitized = self._pipeline.sanitize_and_validate(raw_input, current.values)
            if not sanitized.ok:
                self._state = CommitState.REJECTED
                return CommitResult.rejected(
                    sanitized.errors, security=sanitized.security_rejection
                )

            self._state = CommitState.PERSISTING
            candidate = SettingsSnapshot(
                version=current.version + 1,
                values=sanitized.values or {},
                updated_at=utc_timestamp(),
            )
            self._extensions.invoke_action(BEFORE_COMMIT, candidate)
            try:
                self._persistence.save(candidate)
            except Exception as exc:  # noqa: BLE001 - any storage failure is a persistence failure
                logger.exception("Persisting snapshot version %s failed", candidate.version)
                return CommitResult.failed(FailureKind.PERSISTENCE, str(exc))

            self._snapshot = candidate
            self._state = CommitState.COMMITTED
            self._extensions.invoke_action(AFTER_COMMIT, candidate)
            if self._cache is not None:
                self._cache.invalidate_all()
            logger.info(
                "Committed settings version %s (%d key(s) submitted)",
                candidate.version,
                len(raw_input),
            )
            return CommitResult.committed(candidate)
        finally:
            self._state = CommitState.IDLE

    def _load_initial(self) -> SettingsSnapshot:
        values = self._options.defaults()
        try:
            stored = self._persistence.load()
        except PersistenceError:
            logger.exception("Loading persisted settings failed; starting from defaults")
            stored = None
        if stored is None:
            return SettingsSnapshot(version=0, values=values, updated_at=utc_timestamp())
        dropped = self._pipeline.unknown_keys(stored.values)
        if dropped:
            logger.warning("Dropping stored keys with no registered option: %s", ", ".join(dropped))
        values.update((key, value) for key, value in stored.values.items() if key not in dropped)
        return SettingsSnapshot(
            version=stored.version, values=values, updated_at=stored.updated_at
        )
