# src/taskdash/storage/kv_store.py

"""
Synchronous key-value media for the persisted task snapshot.

All backends store plain strings under string keys (localStorage semantics).
They raise on I/O problems; the persistence adapter decides what to do.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Process-local storage. Nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage:
    """
    One JSON object file holding every key.

    Writes go to a temp file first and are moved into place with os.replace,
    so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileStorage ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"storage file {self._path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except ValueError:
            # Unreadable file: start over rather than refusing every write.
            logger.warning("Storage file %s is corrupt; rewriting it", self._path)
            items = {}
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items)

    def keys(self) -> list[str]:
        return list(self._read_all())


class SqliteStorage:
    """
    SQLite-backed key-value table.

    Each method opens its own short-lived connection. The table is created on
    first use, so an unreadable database file fails inside get_item/set_item
    (where the persistence adapter catches it) rather than at construction.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._schema_ready = False
        logger.info("SqliteStorage ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        try:
            with contextlib.suppress(sqlite3.Error):
                conn.execute("PRAGMA journal_mode=WAL")
            if not self._schema_ready:
                self._ensure_schema(conn)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        conn.commit()
        self._schema_ready = True

    def get_item(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            return [str(r[0]) for r in conn.execute("SELECT key FROM kv ORDER BY key")]
        finally:
            conn.close()


def open_storage(backend: str, path: str | Path) -> MemoryStorage | JsonFileStorage | SqliteStorage:
    """Build the storage backend named in settings ("json", "sqlite" or "memory")."""
    name = (backend or "json").strip().lower()
    if name == "json":
        return JsonFileStorage(path)
    if name == "sqlite":
        return SqliteStorage(path)
    if name == "memory":
        return MemoryStorage()
    raise ValueError(f"Unknown storage backend: {backend!r}")
