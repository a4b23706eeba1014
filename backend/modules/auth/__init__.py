"""
Authentication module.

Handles email and phone authentication, one-time codes, password hashing
and session tokens.

Public API:
- IAuthService, ISmsSender: Interfaces for auth operations and code delivery
- AuthService, PasswordHasher, OTPManager, TokenIssuer: import from their
  own submodules (service, passwords, otp, tokens)
- Request/response models and auth exceptions
"""

from .interfaces import IAuthService, ISmsSender
from .models import (
    RegisterEmailRequest,
    LoginEmailRequest,
    SendOTPRequest,
    VerifyOTPRequest,
    RegisteredUser,
    EmailLoginResult,
    OTPSent,
    OTPVerificationResult,
    RefreshedToken,
    SessionGrant,
    UserSnapshot,
    OTPChallenge,
    DeliveryReceipt,
)
from .exceptions import (
    MissingFieldError,
    PasswordMismatchError,
    InvalidEmailError,
    InvalidPhoneError,
    NameRequiredError,
    InvalidCredentialsError,
    AccountBlockedError,
    InvalidOTPError,
    OTPExpiredError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "ISmsSender",
    # Models
    "RegisterEmailRequest",
    "LoginEmailRequest",
    "SendOTPRequest",
    "VerifyOTPRequest",
    "RegisteredUser",
    "EmailLoginResult",
    "OTPSent",
    "OTPVerificationResult",
    "RefreshedToken",
    "SessionGrant",
    "UserSnapshot",
    "OTPChallenge",
    "DeliveryReceipt",
    # Exceptions
    "MissingFieldError",
    "PasswordMismatchError",
    "InvalidEmailError",
    "InvalidPhoneError",
    "NameRequiredError",
    "InvalidCredentialsError",
    "AccountBlockedError",
    "InvalidOTPError",
    "OTPExpiredError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
]
