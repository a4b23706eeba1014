"""
Session client exceptions.
"""

from typing import Optional


class ApiError(Exception):
    """
    Raised when the server answers with a failure envelope.

    `message` is the server's own message, suitable for showing on a form.
    """

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class SessionEndedError(ApiError):
    """Raised when a call fails because the session expired and could not be refreshed."""

    def __init__(self, status_code: int = 401, message: str = "Session ended", code: Optional[str] = None):
        super().__init__(status_code, message, code)
