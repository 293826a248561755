"""services package."""
from .audit_service import AuditResult, AuditService
from .auth_service import AuthService
from .base import (
    ClassifierError,
    CloudSyncError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)
from .classifier_service import Classification, ClassifierService
from .cloud_service import CloudService
from .member_service import MemberService
from .notification_service import NotificationService
from .schedule_service import ScheduleService
from .store import FederationStore
from .sync_service import SyncService

__all__ = [
    'AuditResult',
    'AuditService',
    'AuthService',
    'Classification',
    'ClassifierError',
    'ClassifierService',
    'CloudService',
    'CloudSyncError',
    'ConflictError',
    'FederationStore',
    'MemberService',
    'NotFoundError',
    'NotificationService',
    'PermissionDeniedError',
    'ScheduleService',
    'ServiceError',
    'SyncService',
    'ValidationError',
]
