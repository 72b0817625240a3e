"""
Domain errors raised by services and rendered as ``{"error": message}``.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A required field is missing or empty (e.g. a role with no permissions)."""
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(AppError):
    """Caller lacks the required permission, or a guard refused the change."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    """Operating on an unknown id."""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Duplicate unique key (role name, github identity, tag or skill name)."""
    status_code = status.HTTP_409_CONFLICT
