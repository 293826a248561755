from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Optional

import sqlite3

logger = logging.getLogger(__name__)


class LocalCacheRepository:
    """Key-value store holding JSON mirrors of the dashboard state."""
    def __init__(self, db_factory: Callable[[], sqlite3.Connection]):
        self._db_factory = db_factory

    def get(self, key: str) -> Optional[str]:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT value FROM kv_store WHERE key = ?', (key,))
            result = cursor.fetchone()
            return result[0] if result else None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)',
                (key, value, datetime.now()),
            )
            conn.commit()
        finally:
            conn.close()

    def load_json(self, key: str, fallback: Any) -> Any:
        """Read and decode ``key``; any missing or unreadable value yields ``fallback``."""
        try:
            raw = self.get(key)
            return json.loads(raw) if raw else fallback
        except (ValueError, sqlite3.Error) as e:
            logger.warning("Discarding unreadable cache entry %s: %s", key, e)
            return fallback

    def save_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))
