"""
Key-value storage backends for the client token store.

Both backends mimic the browser ``localStorage`` surface: string keys mapped
to string values, read and written one key at a time.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Dict, Optional, Protocol

from music_swiper.client.cipher import TokenCipher


class TokenStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Storage that lives as long as the object; the default for tests and scripts."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SQLiteStorage:
    """Persistent storage in a single SQLite table, optionally encrypted at rest."""

    def __init__(self, db_path: str, *, cipher: TokenCipher | None = None) -> None:
        self._db_path = Path(db_path)
        self._cipher = cipher
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS client_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get_item(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM client_storage WHERE key = ?", (key,)
            ).fetchone()
        if not row:
            return None
        value = row["value"]
        return self._cipher.decrypt(value) if self._cipher else value

    def set_item(self, key: str, value: str) -> None:
        stored = self._cipher.encrypt(value) if self._cipher else value
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO client_storage (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, stored),
            )

    def remove_item(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM client_storage WHERE key = ?", (key,))


__all__ = ["MemoryStorage", "SQLiteStorage", "TokenStorage"]
