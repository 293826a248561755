from __future__ import annotations


class ServiceError(Exception):
    """Base error raised by services; routes map it to an HTTP response."""
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class CloudSyncError(ServiceError):
    status_code = 502


class ClassifierError(ServiceError):
    status_code = 502
