"""
Domain exceptions.

Every error raised by services carries its HTTP status and the
``{error, message}`` pair returned to the client. Translation to HTTP
happens once, in :mod:`bizzleap.api.error_handlers`.
"""

from typing import Dict, Optional

from fastapi import status


class BizzLeapError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"
    message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, *, error: Optional[str] = None,
                 headers: Optional[Dict[str, str]] = None):
        if message is not None:
            self.message = message
        if error is not None:
            self.error = error
        self.headers = headers or {}
        super().__init__(self.message)


class ValidationError(BizzLeapError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"
    message = "Invalid input"


class ConflictError(BizzLeapError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
    message = "Resource already exists"


class DuplicateEmail(ConflictError):
    error = "User already exists"
    message = "An account with this email address already exists"


class InvalidCredentials(BizzLeapError):
    # Same error for unknown email and wrong password
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Invalid credentials"
    message = "Email or password is incorrect"


class TokenError(BizzLeapError):
    """Bearer token could not be accepted."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Invalid token"
    message = "Token is invalid"


class TokenMissing(TokenError):
    error = "Access denied"
    message = "No token provided"


class TokenMalformed(TokenError):
    message = "Token is malformed"


class TokenBadSignature(TokenError):
    message = "Token signature is invalid"


class TokenExpired(TokenError):
    error = "Token expired"
    message = "Please login again"


class SessionNotLive(TokenError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Invalid or expired token"
    message = "Session is no longer active"


class NotFound(BizzLeapError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"
    message = "Resource not found"


class OAuthError(BizzLeapError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "OAuth failed"
    message = "Social login could not be completed"


class RateLimited(BizzLeapError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Too many requests"
    message = "Too many authentication attempts, please try again later."


class InternalError(BizzLeapError):
    pass
