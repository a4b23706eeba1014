"""
Authentication module data models.

Request models are deliberately permissive (every field optional) so the
service can report missing or malformed input with its own messages.
Names and email are trimmed; passwords, phone numbers and codes are kept
exactly as sent. Response models serialize to camelCase.
"""

from datetime import datetime
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from shared.models import CamelModel


T = TypeVar("T")

Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class AuthRequest(CamelModel):
    """Base for auth request bodies; numbers sent for text fields are accepted."""

    model_config = ConfigDict(coerce_numbers_to_str=True)


class RegisterEmailRequest(AuthRequest):
    first_name: Optional[Trimmed] = None
    last_name: Optional[Trimmed] = None
    age: Optional[int] = None
    gender: Optional[Trimmed] = None
    email: Optional[Trimmed] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginEmailRequest(AuthRequest):
    email: Optional[Trimmed] = None
    password: Optional[str] = None


class SendOTPRequest(AuthRequest):
    name: Optional[Trimmed] = None
    phone: Optional[str] = None


class VerifyOTPRequest(AuthRequest):
    phone: Optional[str] = None
    otp: Optional[str] = None


class UserSnapshot(CamelModel):
    """Minimal user view carried in a session grant."""

    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class SessionGrant(CamelModel):
    """Bundle returned on successful authentication."""

    token: str
    expires_at: datetime
    user: UserSnapshot


class RegisteredUser(CamelModel):
    """Public profile returned by email registration. Never holds the hash."""

    id: str
    name: str
    age: int
    gender: str
    email: str
    created_at: datetime


class EmailLoginResult(CamelModel):
    id: str
    email: str
    last_login: datetime
    token: str
    expires_at: datetime
    user: UserSnapshot


class OTPSent(CamelModel):
    message: str


class OTPVerificationResult(CamelModel):
    id: str
    phone: str
    registered_at: datetime
    token: str
    expires_at: datetime
    user: UserSnapshot


class RefreshedToken(CamelModel):
    token: str
    expires_at: datetime


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope shared by every auth endpoint."""

    success: bool = True
    message: str
    data: Optional[T] = None


class OTPChallenge(BaseModel):
    """
    A freshly issued one-time code.

    Only digest and expires_at are persisted; code goes to the SMS sender.
    """

    code: str = Field(..., min_length=6, max_length=6)
    digest: str
    expires_at: datetime

    model_config = ConfigDict(frozen=True)


class DeliveryReceipt(BaseModel):
    """Outcome reported by an SMS sender."""

    accepted: bool
    reference: Optional[str] = None
    error: Optional[str] = None
