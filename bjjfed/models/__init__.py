from .account import Account
from .announcement import Announcement
from .member import (
    ADMIN_MEMBER_ID,
    PAYMENT_PAID,
    PAYMENT_UNPAID,
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_TEACHER,
    STATUS_ACTIVE,
    STATUS_PAUSED,
    VALID_PAYMENT_STATUSES,
    VALID_ROLES,
    VALID_STATUSES,
    Member,
    Teacher,
    admin_session_member,
    is_blocked,
)
from .notification import TYPE_ALERT, TYPE_ANNOUNCEMENT, TYPE_SYSTEM, Notification

__all__ = [
    'ADMIN_MEMBER_ID',
    'Account',
    'Announcement',
    'Member',
    'Notification',
    'PAYMENT_PAID',
    'PAYMENT_UNPAID',
    'ROLE_ADMIN',
    'ROLE_STUDENT',
    'ROLE_TEACHER',
    'STATUS_ACTIVE',
    'STATUS_PAUSED',
    'TYPE_ALERT',
    'TYPE_ANNOUNCEMENT',
    'TYPE_SYSTEM',
    'Teacher',
    'VALID_PAYMENT_STATUSES',
    'VALID_ROLES',
    'VALID_STATUSES',
    'admin_session_member',
    'is_blocked',
]
