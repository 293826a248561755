from __future__ import annotations

import concurrent.futures
import logging
from typing import Any

from bjjfed.services.cloud_service import SYNCED_TABLES, CloudService
from bjjfed.services.store import CLOUD_LOCAL, CLOUD_ONLINE, CLOUD_SYNCING, FederationStore

logger = logging.getLogger(__name__)

CHANGE_EVENTS = ('INSERT', 'UPDATE', 'DELETE')


class SyncService:
    """Pulls the three synced tables from the cloud into the local store."""

    def __init__(self, store: FederationStore, cloud: CloudService):
        self._store = store
        self._cloud = cloud

    @property
    def enabled(self) -> bool:
        return self._cloud.enabled

    def refresh(self) -> bool:
        """Re-fetch teachers, students and announcements.

        A collection is replaced only when the remote copy is non-empty, so a
        transient empty response never wipes local data. Returns True when the
        fetch succeeded.
        """
        if not self._cloud.enabled:
            self._store.cloud_status = CLOUD_LOCAL
            return False

        self._store.cloud_status = CLOUD_SYNCING
        try:
            with concurrent.futures.ThreadPoolExecutor(max_workers=3) as executor:
                teachers_future = executor.submit(self._cloud.get_teachers)
                students_future = executor.submit(self._cloud.get_students)
                announcements_future = executor.submit(self._cloud.get_announcements)
                teachers = teachers_future.result()
                students = students_future.result()
                announcements = announcements_future.result()
        except Exception as e:
            logger.error(f"Cloud sync failed: {e}")
            self._store.cloud_status = CLOUD_LOCAL
            return False

        if teachers:
            self._store.replace_teachers(teachers)
        if students:
            self._store.replace_students(students)
        if announcements:
            self._store.replace_announcements(announcements)
        self._store.cloud_status = CLOUD_ONLINE
        logger.info(
            "Cloud sync completed: %s teachers, %s students, %s announcements",
            len(teachers), len(students), len(announcements),
        )
        return True

    def handle_change(self, payload: dict[str, Any]) -> bool:
        """React to a database change notification; returns True if a refresh ran."""
        table = payload.get('table')
        event = str(payload.get('type', '')).upper()
        if table not in SYNCED_TABLES or event not in CHANGE_EVENTS:
            logger.debug("Ignoring change notification for %s/%s", table, event)
            return False
        logger.info("Change notification %s on %s, refreshing", event, table)
        self.refresh()
        return True
