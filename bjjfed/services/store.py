from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from bjjfed.models import Announcement, Member, Teacher
from bjjfed.repositories import LocalCacheRepository
from bjjfed.services.base import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

KEY_TEACHERS = 'bjj_teachers'
KEY_STUDENTS = 'bjj_students'
KEY_ANNOUNCEMENTS = 'bjj_announcements'
KEY_PAY_KEY = 'bjj_fed_pix'

CLOUD_ONLINE = 'online'
CLOUD_SYNCING = 'syncing'
CLOUD_LOCAL = 'local'


class FederationStore:
    """In-memory dashboard state, written through to the local cache on every change.

    Collections are keyed by member id. Readers get copies so callers can't
    mutate the shared lists without going through the store.
    """

    def __init__(self, cache_repo: LocalCacheRepository, default_pay_key: str):
        self._cache = cache_repo
        self._lock = threading.RLock()
        self._teachers: list[Teacher] = []
        self._students: list[Member] = []
        self._announcements: list[Announcement] = []
        self._pay_key = default_pay_key
        self._default_pay_key = default_pay_key
        self.cloud_status = CLOUD_LOCAL

    def load(self) -> None:
        """Populate state from the local cache."""
        with self._lock:
            self._teachers = self._load_list(KEY_TEACHERS, Teacher)
            self._students = self._load_list(KEY_STUDENTS, Member)
            self._announcements = self._load_list(KEY_ANNOUNCEMENTS, Announcement)
            pay_key = self._cache.load_json(KEY_PAY_KEY, self._default_pay_key)
            self._pay_key = pay_key if isinstance(pay_key, str) else self._default_pay_key
        logger.info(
            "Loaded local cache: %s teachers, %s students, %s announcements",
            len(self._teachers), len(self._students), len(self._announcements),
        )

    def _load_list(self, key: str, model):
        raw = self._cache.load_json(key, [])
        if not isinstance(raw, list):
            return []
        items = []
        for entry in raw:
            try:
                items.append(model.from_dict(entry))
            except (TypeError, AttributeError) as e:
                logger.warning("Skipping malformed %s entry: %s", key, e)
        return items

    def _persist(self, *keys: str) -> None:
        for key in keys:
            if key == KEY_TEACHERS:
                self._cache.save_json(key, [t.to_dict() for t in self._teachers])
            elif key == KEY_STUDENTS:
                self._cache.save_json(key, [s.to_dict() for s in self._students])
            elif key == KEY_ANNOUNCEMENTS:
                self._cache.save_json(key, [a.to_dict() for a in self._announcements])
            elif key == KEY_PAY_KEY:
                self._cache.save_json(key, self._pay_key)

    # Reads

    def teachers(self) -> list[Teacher]:
        with self._lock:
            return list(self._teachers)

    def students(self) -> list[Member]:
        with self._lock:
            return list(self._students)

    def announcements(self) -> list[Announcement]:
        with self._lock:
            return list(self._announcements)

    def pay_key(self) -> str:
        with self._lock:
            return self._pay_key

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        with self._lock:
            return next((t for t in self._teachers if t.id == teacher_id), None)

    def get_student(self, student_id: str) -> Optional[Member]:
        with self._lock:
            return next((s for s in self._students if s.id == student_id), None)

    def find_member(self, member_id: str) -> Optional[Member]:
        return self.get_teacher(member_id) or self.get_student(member_id)

    # Bulk replacement (cloud refresh)

    def replace_teachers(self, teachers: Iterable[Teacher]) -> None:
        with self._lock:
            self._teachers = list(teachers)
            self._persist(KEY_TEACHERS)

    def replace_students(self, students: Iterable[Member]) -> None:
        with self._lock:
            self._students = list(students)
            self._persist(KEY_STUDENTS)

    def replace_announcements(self, announcements: Iterable[Announcement]) -> None:
        with self._lock:
            self._announcements = list(announcements)
            self._persist(KEY_ANNOUNCEMENTS)

    # Single-record mutations

    def add_teacher(self, teacher: Teacher) -> None:
        with self._lock:
            if self.get_teacher(teacher.id):
                raise ConflictError(f'Teacher {teacher.id} already exists')
            self._teachers.append(teacher)
            self._persist(KEY_TEACHERS)

    def add_student(self, student: Member) -> None:
        with self._lock:
            if self.get_student(student.id):
                raise ConflictError(f'Student {student.id} already exists')
            self._students.append(student)
            self._persist(KEY_STUDENTS)

    def update_teacher(self, teacher: Teacher) -> None:
        with self._lock:
            self._teachers = self._replace_by_id(self._teachers, teacher, 'Teacher')
            self._persist(KEY_TEACHERS)

    def update_student(self, student: Member) -> None:
        with self._lock:
            self._students = self._replace_by_id(self._students, student, 'Student')
            self._persist(KEY_STUDENTS)

    @staticmethod
    def _replace_by_id(items: list, updated, label: str) -> list:
        if not any(item.id == updated.id for item in items):
            raise NotFoundError(f'{label} {updated.id} not found')
        return [updated if item.id == updated.id else item for item in items]

    def remove_teacher(self, teacher_id: str) -> Teacher:
        with self._lock:
            teacher = self.get_teacher(teacher_id)
            if teacher is None:
                raise NotFoundError(f'Teacher {teacher_id} not found')
            self._teachers = [t for t in self._teachers if t.id != teacher_id]
            self._persist(KEY_TEACHERS)
            return teacher

    def remove_student(self, student_id: str) -> Member:
        with self._lock:
            student = self.get_student(student_id)
            if student is None:
                raise NotFoundError(f'Student {student_id} not found')
            self._students = [s for s in self._students if s.id != student_id]
            self._persist(KEY_STUDENTS)
            return student

    def prepend_announcement(self, announcement: Announcement) -> None:
        with self._lock:
            self._announcements = [announcement] + self._announcements
            self._persist(KEY_ANNOUNCEMENTS)

    def set_pay_key(self, pay_key: str) -> None:
        with self._lock:
            self._pay_key = pay_key
            self._persist(KEY_PAY_KEY)

    def merge_audit_results(self, teachers: Iterable[Teacher], students: Iterable[Member]) -> None:
        """Apply audited payment fields by id; members removed meanwhile are skipped."""
        audited = {m.id: m for m in list(teachers) + list(students)}
        with self._lock:
            self._teachers = [self._merge_audit(t, audited.get(t.id)) for t in self._teachers]
            self._students = [self._merge_audit(s, audited.get(s.id)) for s in self._students]
            self._persist(KEY_TEACHERS, KEY_STUDENTS)

    @staticmethod
    def _merge_audit(current, audited):
        if audited is None or type(audited) is not type(current):
            return current
        current_data = current.to_dict()
        current_data['payment_status'] = audited.payment_status
        current_data['last_ai_audit'] = audited.last_ai_audit
        return type(current).from_dict(current_data)
