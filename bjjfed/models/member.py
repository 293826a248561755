from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Optional

ROLE_ADMIN = 'ADM'
ROLE_TEACHER = 'PROFESSOR'
ROLE_STUDENT = 'ALUNO'
VALID_ROLES = (ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT)

STATUS_ACTIVE = 'active'
STATUS_PAUSED = 'paused'
VALID_STATUSES = (STATUS_ACTIVE, STATUS_PAUSED)

PAYMENT_PAID = 'paid'
PAYMENT_UNPAID = 'unpaid'
VALID_PAYMENT_STATUSES = (PAYMENT_PAID, PAYMENT_UNPAID)

ADMIN_MEMBER_ID = 'admin-1'


@dataclass
class Member:
    """A federation member (student, or the base of a teacher)."""
    id: str
    name: str
    role: str = ROLE_STUDENT
    email: str = ''
    status: str = STATUS_ACTIVE
    payment_status: str = PAYMENT_PAID
    last_ai_audit: Optional[str] = None
    belt: Optional[str] = None
    teacher_id: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        # Unknown columns coming from the remote tables are dropped.
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class Teacher(Member):
    role: str = ROLE_TEACHER
    branch: Optional[str] = None
    classes: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        teacher = super().from_dict(data)
        if teacher.classes is None:
            teacher.classes = []
        return teacher


def admin_session_member() -> Member:
    """Pseudo-member used for the administrator session."""
    return Member(
        id=ADMIN_MEMBER_ID,
        name='Administrator',
        role=ROLE_ADMIN,
        status=STATUS_ACTIVE,
        payment_status=PAYMENT_PAID,
    )


def is_blocked(member: Member) -> bool:
    """Return True when the member must see the blocking screen."""
    if member.is_admin:
        return False
    return member.status == STATUS_PAUSED or member.payment_status == PAYMENT_UNPAID
