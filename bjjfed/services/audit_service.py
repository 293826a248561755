from __future__ import annotations

import concurrent.futures
import logging
import threading
from dataclasses import dataclass

from bjjfed.models import PAYMENT_UNPAID, TYPE_ALERT, TYPE_SYSTEM, Member
from bjjfed.services.base import ConflictError
from bjjfed.services.classifier_service import ACTION_BLOCK, ClassifierService
from bjjfed.services.cloud_service import CloudService
from bjjfed.services.notification_service import NotificationService
from bjjfed.services.store import CLOUD_LOCAL, CLOUD_ONLINE, CLOUD_SYNCING, FederationStore

logger = logging.getLogger(__name__)


@dataclass
class AuditResult:
    success: bool
    audited: int
    blocked: int
    message: str


class AuditService:
    """Runs the AI payment audit over every teacher and student."""

    def __init__(
        self,
        store: FederationStore,
        classifier: ClassifierService,
        cloud: CloudService,
        notification_service: NotificationService,
        max_workers: int = 8,
    ):
        self._store = store
        self._classifier = classifier
        self._cloud = cloud
        self._notifications = notification_service
        self._max_workers = max(1, max_workers)
        self._running = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running.locked()

    def audit_member(self, member: Member) -> Member:
        result = self._classifier.classify(member.name, member.role, 0)
        data = member.to_dict()
        if result.action == ACTION_BLOCK:
            data['payment_status'] = PAYMENT_UNPAID
        data['last_ai_audit'] = result.message
        return type(member).from_dict(data)

    def run(self) -> AuditResult:
        if not self._running.acquire(blocking=False):
            raise ConflictError('An audit is already running')
        try:
            return self._run()
        finally:
            self._running.release()

    def _run(self) -> AuditResult:
        self._store.cloud_status = CLOUD_SYNCING
        try:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                teachers = list(executor.map(self.audit_member, self._store.teachers()))
                students = list(executor.map(self.audit_member, self._store.students()))

            self._store.merge_audit_results(teachers, students)

            if self._cloud.enabled:
                with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                    futures = [executor.submit(self._cloud.upsert_teacher, t) for t in teachers]
                    futures += [executor.submit(self._cloud.upsert_student, s) for s in students]
                    for future in futures:
                        future.result()
                self._store.cloud_status = CLOUD_ONLINE
            else:
                self._store.cloud_status = CLOUD_LOCAL
        except Exception as e:
            logger.error(f"Audit failed: {e}")
            self._store.cloud_status = CLOUD_LOCAL
            self._notifications.notify('Network error', 'Could not synchronize.', TYPE_ALERT)
            return AuditResult(success=False, audited=0, blocked=0, message=str(e))

        audited = len(teachers) + len(students)
        blocked = sum(1 for m in teachers + students if m.payment_status == PAYMENT_UNPAID)
        logger.info("Audit completed: %s members audited, %s unpaid", audited, blocked)
        self._notifications.notify('Audit complete', 'Financial status verified by AI.', TYPE_SYSTEM)
        return AuditResult(success=True, audited=audited, blocked=blocked, message='Audit complete')
