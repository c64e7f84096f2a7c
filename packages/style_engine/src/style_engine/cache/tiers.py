"""Cache tiers: an in-process LRU and persistent collaborators."""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from style_engine.storage import SQLiteDatabase

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class CacheEntry:
    """Derived artifact stamped with the snapshot version it was computed from."""

    key: str
    value: bytes
    size_bytes: int
    created_at: str
    generation: int


class MemoryTier:
    """Bounded LRU keyed by fingerprint, limited by item count and total bytes."""

    def __init__(self, max_items: int = 256, max_bytes: int = 1_048_576) -> None:
        if max_items <= 0 or max_bytes <= 0:
            msg = "MemoryTier limits must be positive"
            raise ValueError(msg)
        self.max_items = max_items
        self.max_bytes = max_bytes
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._total_bytes = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    def put(self, entry: CacheEntry) -> None:
        if entry.size_bytes > self.max_bytes:
            self.delete(entry.key)
            return
        with self._lock:
            previous = self._entries.pop(entry.key, None)
            if previous is not None:
                self._total_bytes -= previous.size_bytes
            self._entries[entry.key] = entry
            self._total_bytes += entry.size_bytes
            while self._entries and (
                len(self._entries) > self.max_items or self._total_bytes > self.max_bytes
            ):
                _, evicted = self._entries.popitem(last=False)
                self._total_bytes -= evicted.size_bytes

    def delete(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return False
            self._total_bytes -= entry.size_bytes
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_bytes = 0

    @property
    def item_count(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return self._total_bytes


class PersistentCacheTier(Protocol):
    """Storage collaborator for the second cache tier. May raise ``PersistenceError``."""

    def get(self, key: str) -> CacheEntry | None: ...

    def put(self, entry: CacheEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def stats(self) -> tuple[int, int]:
        """Return ``(item_count, total_bytes)``."""
        ...


class InMemoryCacheTier:
    """Dictionary-backed persistent tier for tests and single-process use."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[entry.key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def stats(self) -> tuple[int, int]:
        with self._lock:
            return len(self._entries), sum(entry.size_bytes for entry in self._entries.values())


class SQLiteCacheTier:
    """Persistent tier stored in a SQLite table."""

    def __init__(self, db_path: str | Path) -> None:
        self._db = SQLiteDatabase(
            db_path,
            (
                """
                CREATE TABLE IF NOT EXISTS cache_entries (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL,
                    size_bytes INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    generation INTEGER NOT NULL
                )
                """,
            ),
        )

    def get(self, key: str) -> CacheEntry | None:
        row = self._db.fetch_one(
            """SELECT key, value, size_bytes, created_at, generation
               FROM cache_entries WHERE key = ?""",
            (key,),
        )
        if row is None:
            return None
        return CacheEntry(
            key=row[0],
            value=bytes(row[1]),
            size_bytes=int(row[2]),
            created_at=row[3],
            generation=int(row[4]),
        )

    def put(self, entry: CacheEntry) -> None:
        self._db.execute(
            """INSERT OR REPLACE INTO cache_entries
               (key, value, size_bytes, created_at, generation)
               VALUES (?, ?, ?, ?, ?)""",
            (entry.key, entry.value, entry.size_bytes, entry.created_at, entry.generation),
        )

    def delete(self, key: str) -> None:
        self._db.execute("DELETE FROM cache_entries WHERE key = ?", (key,))

    def stats(self) -> tuple[int, int]:
        row = self._db.fetch_one("SELECT COUNT(*), COALESCE(SUM(size_bytes), 0) FROM cache_entries")
        if row is None:
            return 0, 0
        return int(row[0]), int(row[1])
