# src/tasktracker/tasks/task_storage.py

"""
Raw persistence adapters for the task list.

Both adapters only move bytes; encoding lives in task_codec.
- JsonFileStorage: one JSON file, replaced atomically (tmp + os.replace).
- SqliteStorage: a tiny key/value table, one row per key (default key "tasks").
"""

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStorage:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_raw(self) -> bytes | None:
        if not self._path.exists():
            return None
        try:
            return self._path.read_bytes()
        except OSError:
            logger.exception("Failed to read task file %s", self._path)
            return None

    def save_raw(self, data: bytes) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_bytes(data)
            os.replace(tmp, self._path)
        except OSError:
            logger.exception("Failed to write task file %s", self._path)
            raise
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)


class SqliteStorage:
    """
    SQLite key/value storage.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, key: str = "tasks") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = key
        self._ensure_schema()
        logger.info("SqliteStorage ready db=%s key=%s", self._db_path, self._key)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def load_raw(self) -> bytes | None:
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Failed to open %s", self._db_path)
            return None
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,)).fetchone()
        except sqlite3.Error:
            logger.exception("Failed to read key=%s from %s", self._key, self._db_path)
            return None
        finally:
            conn.close()

        if row is None:
            return None
        value = row[0]
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def save_raw(self, data: bytes) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (self._key, sqlite3.Binary(data)),
            )
            conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to write key=%s to %s", self._key, self._db_path)
            raise
        finally:
            conn.close()
