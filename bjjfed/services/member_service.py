from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from bjjfed.models import (
    ADMIN_MEMBER_ID,
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_TEACHER,
    STATUS_ACTIVE,
    STATUS_PAUSED,
    TYPE_ALERT,
    TYPE_ANNOUNCEMENT,
    TYPE_SYSTEM,
    Announcement,
    Member,
    Teacher,
)
from bjjfed.services.auth_service import AuthService
from bjjfed.services.base import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from bjjfed.services.cloud_service import TABLE_STUDENTS, TABLE_TEACHERS, CloudService
from bjjfed.services.notification_service import NotificationService
from bjjfed.services.store import CLOUD_LOCAL, FederationStore

logger = logging.getLogger(__name__)

# Fields a student may change on their own record.
STUDENT_SELF_FIELDS = ('name', 'email', 'belt')
# Fields nobody changes through an update (set by the system).
PROTECTED_FIELDS = ('id', 'role', 'created_at')


def new_id() -> str:
    return secrets.token_hex(6)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemberService:
    """Teacher, student and announcement mutations.

    Every change is applied to the local store first and then pushed to the
    cloud; a failed push flips the cloud status to local and raises an alert
    notification but keeps the local change.
    """

    def __init__(
        self,
        store: FederationStore,
        cloud: CloudService,
        notification_service: NotificationService,
        auth_service: AuthService,
    ):
        self._store = store
        self._cloud = cloud
        self._notifications = notification_service
        self._auth = auth_service

    def _push(self, operation: Callable, *args) -> bool:
        if not self._cloud.enabled:
            return False
        try:
            operation(*args)
            return True
        except Exception as e:
            logger.error(f"Cloud update failed: {e}")
            self._store.cloud_status = CLOUD_LOCAL
            self._notifications.notify('Network error', 'Could not synchronize.', TYPE_ALERT)
            return False

    # Visibility

    def visible_students(self, actor: Member) -> list[Member]:
        students = self._store.students()
        if actor.role == ROLE_ADMIN:
            return students
        if actor.role == ROLE_TEACHER:
            return [s for s in students if s.teacher_id == actor.id]
        return [s for s in students if s.id == actor.id]

    def _require_student_access(self, actor: Member, student: Member) -> None:
        if actor.role == ROLE_ADMIN:
            return
        if actor.role == ROLE_TEACHER and student.teacher_id == actor.id:
            return
        raise PermissionDeniedError('Not allowed to manage this student')

    def _get_teacher(self, teacher_id: str) -> Teacher:
        teacher = self._store.get_teacher(teacher_id)
        if teacher is None:
            raise NotFoundError(f'Teacher {teacher_id} not found')
        return teacher

    def _get_student(self, student_id: str) -> Member:
        student = self._store.get_student(student_id)
        if student is None:
            raise NotFoundError(f'Student {student_id} not found')
        return student

    def _require_unused_id(self, member_id: str) -> None:
        # Unique across teachers, students and the admin pseudo-member.
        if member_id == ADMIN_MEMBER_ID or self._store.find_member(member_id):
            raise ConflictError(f'Member id {member_id} is already in use')

    def _create_login(self, data: dict[str, Any], role: str, member_id: str) -> None:
        username = data.get('username')
        password = data.get('password')
        if username and password:
            self._auth.create_account(username, password, role, member_id)

    # Teachers

    def create_teacher(self, data: dict[str, Any]) -> Teacher:
        record = self._member_record(data, ROLE_TEACHER)
        teacher = Teacher.from_dict(record)
        self._require_unused_id(teacher.id)
        self._create_login(data, ROLE_TEACHER, teacher.id)
        self._store.add_teacher(teacher)
        self._push(self._cloud.upsert_teacher, teacher)
        logger.info(f"Teacher {teacher.name} ({teacher.id}) created")
        return teacher

    def update_teacher(self, actor: Member, teacher_id: str, changes: dict[str, Any]) -> Teacher:
        if actor.role != ROLE_ADMIN and not (actor.role == ROLE_TEACHER and actor.id == teacher_id):
            raise PermissionDeniedError('Not allowed to edit this teacher')
        current = self._get_teacher(teacher_id)
        allowed = None if actor.role == ROLE_ADMIN else STUDENT_SELF_FIELDS + ('branch', 'classes')
        updated = Teacher.from_dict(self._apply_changes(current.to_dict(), changes, allowed))
        self._store.update_teacher(updated)
        self._push(self._cloud.upsert_teacher, updated)
        return updated

    def toggle_teacher_status(self, teacher_id: str) -> Teacher:
        current = self._get_teacher(teacher_id)
        data = current.to_dict()
        data['status'] = STATUS_PAUSED if current.status == STATUS_ACTIVE else STATUS_ACTIVE
        updated = Teacher.from_dict(data)
        self._store.update_teacher(updated)
        self._push(self._cloud.upsert_teacher, updated)
        logger.info(f"Teacher {teacher_id} is now {updated.status}")
        return updated

    def delete_teacher(self, teacher_id: str) -> None:
        self._store.remove_teacher(teacher_id)
        self._auth.delete_accounts_for(teacher_id)
        self._push(self._cloud.delete_member, teacher_id, TABLE_TEACHERS)
        self._notifications.notify('Cloud update', 'Record removed successfully.', TYPE_SYSTEM)
        logger.info(f"Teacher {teacher_id} deleted")

    # Students

    def create_student(self, actor: Member, data: dict[str, Any]) -> Member:
        record = self._member_record(data, ROLE_STUDENT)
        if actor.role == ROLE_TEACHER:
            record['teacher_id'] = actor.id
        elif actor.role != ROLE_ADMIN:
            raise PermissionDeniedError('Not allowed to register students')
        student = Member.from_dict(record)
        self._require_unused_id(student.id)
        self._create_login(data, ROLE_STUDENT, student.id)
        self._store.add_student(student)
        self._push(self._cloud.upsert_student, student)
        logger.info(f"Student {student.name} ({student.id}) created")
        return student

    def update_student(self, actor: Member, student_id: str, changes: dict[str, Any]) -> Member:
        current = self._get_student(student_id)
        allowed: Optional[tuple] = None
        if actor.role == ROLE_STUDENT:
            if actor.id != student_id:
                raise PermissionDeniedError('Not allowed to edit this student')
            allowed = STUDENT_SELF_FIELDS
        else:
            self._require_student_access(actor, current)
        updated = Member.from_dict(self._apply_changes(current.to_dict(), changes, allowed))
        self._store.update_student(updated)
        self._push(self._cloud.upsert_student, updated)
        return updated

    def toggle_student_status(self, actor: Member, student_id: str) -> Member:
        current = self._get_student(student_id)
        self._require_student_access(actor, current)
        data = current.to_dict()
        data['status'] = STATUS_PAUSED if current.status == STATUS_ACTIVE else STATUS_ACTIVE
        updated = Member.from_dict(data)
        self._store.update_student(updated)
        self._push(self._cloud.upsert_student, updated)
        logger.info(f"Student {student_id} is now {updated.status}")
        return updated

    def delete_student(self, actor: Member, student_id: str) -> None:
        self._require_student_access(actor, self._get_student(student_id))
        self._store.remove_student(student_id)
        self._auth.delete_accounts_for(student_id)
        self._push(self._cloud.delete_member, student_id, TABLE_STUDENTS)
        logger.info(f"Student {student_id} deleted")

    # Announcements and pay key

    def post_announcement(self, actor: Member, content: str) -> Announcement:
        if actor.role not in (ROLE_ADMIN, ROLE_TEACHER):
            raise PermissionDeniedError('Only teachers and administrators can post announcements')
        if not content:
            raise ValidationError('Announcement content is required')
        announcement = Announcement(
            id=new_id(),
            content=content,
            timestamp=utc_now(),
            author_id=actor.id,
            author_name=actor.name,
        )
        self._store.prepend_announcement(announcement)
        self._push(self._cloud.post_announcement, announcement)
        self._notifications.notify(f'New announcement from {actor.name}', content, TYPE_ANNOUNCEMENT)
        return announcement

    def set_pay_key(self, pay_key: str) -> None:
        if not pay_key:
            raise ValidationError('Pay key is required')
        self._store.set_pay_key(pay_key)
        logger.info("Federation pay key updated")

    # Helpers

    @staticmethod
    def _member_record(data: dict[str, Any], role: str) -> dict[str, Any]:
        record = {
            key: value for key, value in data.items()
            if key not in ('username', 'password', 'role')
        }
        record['id'] = record.get('id') or new_id()
        record['role'] = role
        record['created_at'] = utc_now()
        return record

    @staticmethod
    def _apply_changes(
        current: dict[str, Any],
        changes: dict[str, Any],
        allowed: Optional[tuple],
    ) -> dict[str, Any]:
        for key, value in changes.items():
            if key in PROTECTED_FIELDS or key not in current:
                continue
            if allowed is not None and key not in allowed:
                raise PermissionDeniedError(f'Field "{key}" cannot be changed')
            current[key] = value
        return current
