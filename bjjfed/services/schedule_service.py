from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from bjjfed.repositories import LocalCacheRepository
from bjjfed.services.sync_service import SyncService
from bjjfed.utils.validators import validate_cron_expression

logger = logging.getLogger(__name__)

RESYNC_JOB_ID = 'cloud_resync'
SYNC_CRON_DEFAULT = '*/15 * * * *'


class ScheduleService:
    """Owns the background scheduler and the periodic cloud resync job."""

    def __init__(self, settings_repo: LocalCacheRepository, sync_service: SyncService,
                 scheduler: BackgroundScheduler | None = None):
        self._settings_repo = settings_repo
        self._sync_service = sync_service
        self.scheduler = scheduler or BackgroundScheduler()

    def get_setting(self, key: str, default: str) -> str:
        value = self._settings_repo.get(key)
        return value if value is not None else default

    def sync_settings(self) -> dict:
        return {
            'sync_enabled': self.get_setting('sync_enabled', 'true'),
            'sync_cron': self.get_setting('sync_cron', SYNC_CRON_DEFAULT),
        }

    def save_sync_settings(self, enabled: bool, cron_expression: str) -> None:
        self._settings_repo.set('sync_enabled', 'true' if enabled else 'false')
        self._settings_repo.set('sync_cron', cron_expression or SYNC_CRON_DEFAULT)
        self.configure_resync()

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
        self.configure_resync()

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def run_resync_job(self) -> None:
        """System job that pulls the cloud tables again."""
        try:
            self._sync_service.refresh()
        except Exception as error:
            logger.error(f"Scheduled cloud resync failed: {error}")

    def configure_resync(self) -> bool:
        """Configure or disable the resync job; returns True when a job is scheduled."""
        try:
            self.scheduler.remove_job(RESYNC_JOB_ID)
        except Exception as e:
            logger.debug(f"Could not remove job {RESYNC_JOB_ID} (may not exist): {e}")

        settings = self.sync_settings()
        if settings['sync_enabled'].lower() != 'true' or not self._sync_service.enabled:
            return False

        cron_expression = settings['sync_cron']
        valid, error = validate_cron_expression(cron_expression)
        if not valid:
            logger.warning("Invalid resync cron expression %s: %s", cron_expression, error)
            return False

        self.scheduler.add_job(
            self.run_resync_job,
            CronTrigger.from_crontab(cron_expression),
            id=RESYNC_JOB_ID,
            replace_existing=True,
        )
        return True
