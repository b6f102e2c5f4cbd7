"""
Application error taxonomy.

Every failure the API reports on purpose is an AppError subclass; the handlers
registered in main.py turn them into the standard response envelope.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors rendered as {success: false, message, errors}."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[str] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class PayloadValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token is required"


class InvalidToken(Unauthenticated):
    default_message = "Invalid token"


class TokenExpired(Unauthenticated):
    default_message = "Token has expired"


class SessionInvalidated(Unauthenticated):
    default_message = "Invalid or expired token"


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid email or password"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InvalidReference(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "One or more referenced resources do not exist or do not belong to you"


class NoFieldsProvided(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No valid fields to update"


class MissingToken(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Token is required"


class OAuthFailed(AppError):
    default_message = "Google OAuth authentication failed"


class Internal(AppError):
    pass
