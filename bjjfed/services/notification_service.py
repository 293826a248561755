from __future__ import annotations

import secrets
import threading
import time
from typing import Callable

from bjjfed.models import TYPE_ALERT, TYPE_ANNOUNCEMENT, TYPE_SYSTEM, Notification

VALID_TYPES = (TYPE_ANNOUNCEMENT, TYPE_SYSTEM, TYPE_ALERT)


class NotificationService:
    """Transient in-app notifications shown on every dashboard."""

    def __init__(self, ttl_seconds: int = 8, clock: Callable[[], float] = time.time):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._items: list[Notification] = []

    def notify(self, title: str, message: str, type: str = TYPE_SYSTEM) -> Notification:
        if type not in VALID_TYPES:
            type = TYPE_SYSTEM
        notification = Notification(
            id=secrets.token_hex(5),
            title=title,
            message=message,
            type=type,
            created_at=self._clock(),
        )
        with self._lock:
            self._items.append(notification)
        return notification

    def active(self) -> list[Notification]:
        now = self._clock()
        with self._lock:
            self._items = [n for n in self._items if now - n.created_at < self._ttl_seconds]
            return list(self._items)

    def dismiss(self, notification_id: str) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [n for n in self._items if n.id != notification_id]
            return len(self._items) != before
