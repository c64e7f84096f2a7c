"""SQLite helpers shared by the persistence collaborators."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from style_engine.errors import PersistenceError


class SQLiteDatabase:
    """Thin wrapper that opens one connection per call.

    ``sqlite3.Error`` is re-raised as ``PersistenceError`` so callers deal with a
    single storage failure type.
    """

    def __init__(self, db_path: str | Path, schema: tuple[str, ...] = ()) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._schema = schema
        self._init_db()

    def fetch_all(self, query: str, params: tuple[Any, ...] = ()) -> list[tuple[Any, ...]]:
        """Run a query and return every row."""
        try:
            with sqlite3.connect(self._db_path) as conn:
                cursor = conn.execute(query, params)
                return cursor.fetchall()
        except sqlite3.Error as exc:
            msg = f"SQLite query failed on {self._db_path}: {exc}"
            raise PersistenceError(msg) from exc

    def fetch_one(self, query: str, params: tuple[Any, ...] = ()) -> tuple[Any, ...] | None:
        """Run a query and return the first row, if any."""
        rows = self.fetch_all(query, params)
        return rows[0] if rows else None

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> None:
        """Run a statement and commit."""
        try:
            with sqlite3.connect(self._db_path) as conn:
                conn.execute(query, params)
                conn.commit()
        except sqlite3.Error as exc:
            msg = f"SQLite write failed on {self._db_path}: {exc}"
            raise PersistenceError(msg) from exc

    def _init_db(self) -> None:
        try:
            with sqlite3.connect(self._db_path) as conn:
                for statement in self._schema:
                    conn.execute(statement)
        except sqlite3.Error as exc:
            msg = f"Could not initialise {self._db_path}: {exc}"
            raise PersistenceError(msg) from exc
