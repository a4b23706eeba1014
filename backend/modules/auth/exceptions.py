"""
Authentication module exceptions.

These exceptions are raised by the auth module and caught by the API error
handlers, which render them as {"success": false, "message": ...} with the
status code of their base class.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExpiredError,
    ValidationError,
)


class MissingFieldError(ValidationError):
    """Raised when a required request field is absent or empty."""

    def __init__(self, message: str = "All fields are required", fields: list[str] | None = None):
        super().__init__(message, code="MISSING_FIELD", details={"fields": fields or []})


class PasswordMismatchError(ValidationError):
    """Raised when password and confirmPassword differ."""

    def __init__(self):
        super().__init__("Passwords do not match", code="PASSWORD_MISMATCH")


class InvalidEmailError(ValidationError):
    def __init__(self):
        super().__init__("Invalid email address", code="INVALID_EMAIL")


class InvalidPhoneError(ValidationError):
    def __init__(self):
        super().__init__("Valid 10-digit phone number is required", code="INVALID_PHONE")


class InvalidAgeError(ValidationError):
    def __init__(self):
        super().__init__("Age must be a whole number of at least 18", code="INVALID_AGE")


class InvalidGenderError(ValidationError):
    def __init__(self):
        super().__init__("Gender must be male, female, or other", code="INVALID_GENDER")


class WeakPasswordError(ValidationError):
    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters",
            code="WEAK_PASSWORD",
            details={"min_length": min_length},
        )


class NameRequiredError(ValidationError):
    """Raised when a first-time phone sign-up omits the user's name."""

    def __init__(self):
        super().__init__("User name is required", code="NAME_REQUIRED")


class InvalidCredentialsError(AuthenticationError):
    """
    Raised for an unknown identity or a wrong secret.

    The message never says which of the two happened.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class AccountBlockedError(AuthorizationError):
    def __init__(self):
        super().__init__("Account is blocked. Contact administrator.", code="ACCOUNT_BLOCKED")


class InvalidOTPError(AuthenticationError):
    """Raised when no code is pending for the phone or the code is wrong."""

    def __init__(self, message: str = "Invalid or expired OTP"):
        super().__init__(message, code="INVALID_OTP")


class OTPExpiredError(ExpiredError):
    def __init__(self):
        super().__init__("OTP expired", code="OTP_EXPIRED")


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no session token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")
