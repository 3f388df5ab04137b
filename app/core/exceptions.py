"""Application error taxonomy.

Every failure that reaches the request boundary is one of these, and is rendered
as ``{"error": message}`` with the matching status code by the handlers
registered in ``app.main``.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors with a fixed HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class CodeExpiredError(ValidationError):
    default_message = "Code has expired"


class AuthenticationError(AppError):
    """Bad credentials or an invalid/expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid or expired token"


class SessionExpiredError(AuthenticationError):
    default_message = "Refresh token expired"


class AuthorizationError(AppError):
    """Blocked account or insufficient role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(AppError):
    """Persistence, hashing or other unexpected failure."""
