"""Error taxonomy for the student auth flows.

Every error carries the HTTP status it maps to and a caller-safe message;
``api.middleware`` turns them into ``{"success": false, "message": ...}`` bodies.
"""

from __future__ import annotations

from fastapi import status


class AuthError(Exception):
    """Base class for all auth errors surfaced to callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing, malformed or too-long fields, or a password rule violation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateIdentity(AuthError):
    """Email or student ID is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists with this email or student ID"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password. The two cases are deliberately identical."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class ForbiddenRole(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized as student"


class NotFound(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class InvalidToken(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class TokenExpired(InvalidToken):
    default_message = "Token has expired"
