"""Settings persistence collaborators."""

from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING, Protocol

from style_engine.errors import PersistenceError
from style_engine.models.snapshot import SettingsSnapshot
from style_engine.storage import SQLiteDatabase

if TYPE_CHECKING:
    from pathlib import Path


class SettingsPersistence(Protocol):
    """Document store for the current snapshot. Failures raise ``PersistenceError``."""

    def load(self) -> SettingsSnapshot | None: ...

    def save(self, snapshot: SettingsSnapshot) -> None: ...


class InMemoryPersistence:
    """Keeps the last saved snapshot in memory."""

    def __init__(self, snapshot: SettingsSnapshot | None = None) -> None:
        self._snapshot = snapshot
        self._lock = threading.Lock()
        self.save_count = 0

    def load(self) -> SettingsSnapshot | None:
        with self._lock:
            return self._snapshot

    def save(self, snapshot: SettingsSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
            self.save_count += 1


class SQLitePersistence:
    """Stores the snapshot as a single JSON document row."""

    def __init__(self, db_path: str | Path) -> None:
        self._db = SQLiteDatabase(
            db_path,
            (
                """
                CREATE TABLE IF NOT EXISTS settings_snapshot (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    version INTEGER NOT NULL,
                    values_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """,
            ),
        )

    def load(self) -> SettingsSnapshot | None:
        row = self._db.fetch_one(
            "SELECT version, values_json, updated_at FROM settings_snapshot WHERE id = 1"
        )
        if row is None:
            return None
        try:
            values = json.loads(row[1])
        except json.JSONDecodeError as exc:
            msg = f"Stored settings document is not valid JSON: {exc}"
            raise PersistenceError(msg) from exc
        if not isinstance(values, dict):
            msg = "Stored settings document is not an object"
            raise PersistenceError(msg)
        return SettingsSnapshot(version=int(row[0]), values=values, updated_at=row[2])

    def save(self, snapshot: SettingsSnapshot) -> None:
        try:
            payload = json.dumps(dict(snapshot.values), ensure_ascii=True, sort_keys=True)
        except (TypeError, ValueError) as exc:
            msg = f"Snapshot values are not JSON serializable: {exc}"
            raise PersistenceError(msg) from exc
        self._db.execute(
            """INSERT INTO settings_snapshot (id, version, values_json, updated_at)
               VALUES (1, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                   version = excluded.version,
                   values_json = excluded.values_json,
                   updated_at = excluded.updated_at""",
            (snapshot.version, payload, snapshot.updated_at),
        )
