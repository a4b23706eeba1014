"""
Authentication module interfaces.

Routes depend on IAuthService; the service depends on ISmsSender for
code delivery. Both are Protocols so tests can pass in fakes.
"""

from typing import Protocol, runtime_checkable

from .models import (
    DeliveryReceipt,
    EmailLoginResult,
    LoginEmailRequest,
    OTPSent,
    OTPVerificationResult,
    RefreshedToken,
    RegisterEmailRequest,
    RegisteredUser,
    SendOTPRequest,
    VerifyOTPRequest,
)


@runtime_checkable
class ISmsSender(Protocol):
    """Delivery channel for one-time codes."""

    async def send(self, phone: str, code: str) -> DeliveryReceipt:
        """
        Deliver a code to a 10-digit phone number.

        Returns:
            DeliveryReceipt, accepted=False when the provider refused
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    Every method raises a CitizoneError subclass on failure; unexpected
    faults surface as InternalError.
    """

    async def register_by_email(self, request: RegisterEmailRequest) -> RegisteredUser:
        """
        Register a new user with email and password.

        Raises:
            ValidationError: Missing field, mismatch, invalid format
            ConflictError: Email already registered
        """
        ...

    async def login_by_email(self, request: LoginEmailRequest) -> EmailLoginResult:
        """
        Authenticate with email and password and issue a session grant.

        Raises:
            AuthenticationError: Unknown email or wrong password
            AuthorizationError: Account blocked
        """
        ...

    async def mobile_auth(self, request: SendOTPRequest) -> OTPSent:
        """
        Issue a one-time code for a phone, creating the user if needed.

        Raises:
            ValidationError: Invalid phone, or name missing for a new phone
        """
        ...

    async def verify_otp(self, request: VerifyOTPRequest) -> OTPVerificationResult:
        """
        Consume a pending one-time code and issue a session grant.

        Raises:
            AuthenticationError: No pending code, or wrong code
            ExpiredError: Code past its expiry (the code is consumed)
        """
        ...

    async def refresh_session(self, token: str) -> RefreshedToken:
        """
        Exchange a recent session token for a fresh one.

        Raises:
            AuthenticationError: Token invalid, too old, or user gone
            AuthorizationError: Account blocked
        """
        ...
