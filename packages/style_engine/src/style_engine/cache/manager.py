"""Two-tier cache for artifacts derived from the current settings snapshot."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from style_engine.cache.tiers import CacheEntry, MemoryTier
from style_engine.errors import PersistenceError
from style_engine.extensions.points import CACHE_INVALIDATED
from style_engine.utils import utc_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable

    from style_engine.cache.tiers import PersistentCacheTier
    from style_engine.extensions.registry import ExtensionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time cache counters for diagnostics.

    ``item_count`` and ``total_bytes`` describe the in-process tier.
    """

    item_count: int
    total_bytes: int
    hit_count: int
    miss_count: int
    persistent_item_count: int
    persistent_total_bytes: int
    invalidations: int
    generation: int

    @property
    def hit_rate(self) -> float:
        """Hits as a fraction of lookups."""
        lookups = self.hit_count + self.miss_count
        return self.hit_count / lookups if lookups else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["hit_rate"] = round(self.hit_rate, 4)
        return data


class CacheManager:
    """Look up derived artifacts in memory, then in the persistent tier.

    Every entry carries the generation it was computed for. ``generation`` is
    read from the settings store on each call, so a commit makes older entries
    misses without touching them.
    """

    def __init__(
        self,
        extensions: ExtensionRegistry,
        generation: Callable[[], int],
        *,
        memory: MemoryTier | None = None,
        persistent: PersistentCacheTier | None = None,
    ) -> None:
        self._extensions = extensions
        self._generation = generation
        self._memory = memory or MemoryTier()
        self._persistent = persistent
        self._counter_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._invalidations = 0

    @property
    def generation(self) -> int:
        """Current generation."""
        return self._generation()

    def get(self, key: str) -> bytes | None:
        """Return a cached value for the current generation, or None on a miss."""
        generation = self._generation()
        entry = self._memory.get(key)
        if entry is not None:
            if entry.generation == generation:
                self._count(hit=True)
                logger.debug("Cache hit (memory) for %s", key[:12])
                return entry.value
            self._memory.delete(key)

        entry = self._persistent_get(key)
        if entry is not None:
            if entry.generation == generation:
                self._memory.put(entry)
                self._count(hit=True)
                logger.debug("Cache hit (persistent) for %s", key[:12])
                return entry.value
            self._persistent_delete(key)

        self._count(hit=False)
        logger.debug("Cache miss for %s", key[:12])
        return None

    def put(
        self,
        key: str,
        value: bytes,
        size_bytes: int | None = None,
        generation: int | None = None,
    ) -> CacheEntry:
        """Write both tiers, stamping the current generation unless one is given."""
        entry = CacheEntry(
            key=key,
            value=value,
            size_bytes=len(value) if size_bytes is None else size_bytes,
            created_at=utc_timestamp(),
            generation=self._generation() if generation is None else generation,
        )
        self._memory.put(entry)
        if self._persistent is not None:
            try:
                self._persistent.put(entry)
            except PersistenceError:
                logger.exception("Persistent cache write failed for %s", key[:12])
        return entry

    def delete(self, key: str) -> None:
        """Drop a key from both tiers."""
        self._memory.delete(key)
        self._persistent_delete(key)

    def remember(
        self,
        key: str,
        producer: Callable[[], bytes],
        generation: int | None = None,
    ) -> bytes:
        """Return the cached value or compute, store and return it."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = producer()
        self.put(key, value, generation=generation)
        return value

    def invalidate_all(self) -> None:
        """Clear the in-process tier; persistent entries expire on their next read."""
        self._memory.clear()
        with self._counter_lock:
            self._invalidations += 1
        generation = self._generation()
        logger.debug("Cache invalidated at generation %s", generation)
        self._extensions.invoke_action(CACHE_INVALIDATED, generation)

    def get_stats(self) -> CacheStats:
        """Return cache counters."""
        persistent_items, persistent_bytes = 0, 0
        if self._persistent is not None:
            try:
                persistent_items, persistent_bytes = self._persistent.stats()
            except PersistenceError:
                logger.exception("Could not read persistent cache stats")
        with self._counter_lock:
            hits, misses, invalidations = self._hits, self._misses, self._invalidations
        return CacheStats(
            item_count=self._memory.item_count,
            total_bytes=self._memory.total_bytes,
            hit_count=hits,
            miss_count=misses,
            persistent_item_count=persistent_items,
            persistent_total_bytes=persistent_bytes,
            invalidations=invalidations,
            generation=self._generation(),
        )

    def _count(self, *, hit: bool) -> None:
        with self._counter_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def _persistent_get(self, key: str) -> CacheEntry | None:
        if self._persistent is None:
            return None
        try:
            return self._persistent.get(key)
        except PersistenceError:
            logger.exception("Persistent cache read failed for %s", key[:12])
            return None

    def _persistent_delete(self, key: str) -> None:
        if self._persistent is None:
            return
        try:
            self._persistent.delete(key)
        except PersistenceError:
            logger.exception("Persistent cache delete failed for %s", key[:12])
