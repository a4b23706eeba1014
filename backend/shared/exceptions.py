"""
Base exception classes for the Citizone backend.

Each module should define its own exceptions that inherit from these bases.
Every base carries the HTTP status the API error handler responds with, so
route code never maps exceptions to status codes by hand.
"""

from typing import Optional, Any


class CitizoneError(Exception):
    """
    Base exception for all Citizone errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(CitizoneError):
    """Input validation failed (malformed or missing input)."""

    status_code = 400


class ExpiredError(CitizoneError):
    """A time-bounded secret was used after its expiry."""

    status_code = 400


class AuthenticationError(CitizoneError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(CitizoneError):
    """Authorization failed (account blocked or insufficient permissions)."""

    status_code = 403


class NotFoundError(CitizoneError):
    """Resource not found."""

    status_code = 404


class ConflictError(CitizoneError):
    """The operation would duplicate an existing identity."""

    status_code = 409


class InternalError(CitizoneError):
    """Unexpected fault while handling a request."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="INTERNAL_ERROR", details=details)

