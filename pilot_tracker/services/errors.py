"""
Domain errors raised by the site services.

Each error carries an ``ErrorKind`` so the failure cause survives all the
way to the client envelope.
"""
from enum import Enum


class ErrorKind(str, Enum):
    """Discriminator for failed operations."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    VALIDATION_FAILURE = "validation_failure"
    DATABASE_ERROR = "database_error"


class SiteOperationError(Exception):
    """Base class for failures of a site operation."""

    kind: ErrorKind = ErrorKind.DATABASE_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SiteOperationError):
    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(SiteOperationError):
    kind = ErrorKind.PERMISSION_DENIED


class ValidationFailureError(SiteOperationError):
    kind = ErrorKind.VALIDATION_FAILURE
