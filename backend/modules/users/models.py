"""
User module data models.

The User record is the only persisted entity in the auth core. It is
handed between the auth service and the credential store as an immutable
snapshot: updates go through model_copy() and a single save().
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class User(BaseModel):
    """
    Identity record.

    Email users carry a password hash; phone users carry only the pending
    OTP pair until they verify.
    """

    id: Optional[str] = Field(None, description="Store-assigned identifier")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = Field(None, ge=18)
    gender: Optional[Gender] = None
    email: Optional[str] = Field(None, description="Lower-cased, unique when present")
    phone: Optional[str] = Field(None, description="10 digits, unique when present")
    password_hash: Optional[str] = None
    role: Role = Role.USER
    is_blocked: bool = False
    registered_at: datetime = Field(default_factory=utc_now)
    last_login: Optional[datetime] = None

    # Pending one-time code; both set or both empty
    phone_otp_hash: Optional[str] = None
    phone_otp_expires_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _otp_fields_travel_together(self) -> "User":
        if (self.phone_otp_hash is None) != (self.phone_otp_expires_at is None):
            raise ValueError("phone_otp_hash and phone_otp_expires_at must be set together")
        return self

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def has_pending_otp(self) -> bool:
        return self.phone_otp_hash is not None

    @property
    def can_use_password(self) -> bool:
        return bool(self.password_hash)

    def with_otp(self, digest: str, expires_at: datetime) -> "User":
        """Return a copy holding a fresh pending code."""
        return self.model_copy(
            update={"phone_otp_hash": digest, "phone_otp_expires_at": expires_at}
        )

    def without_otp(self) -> "User":
        """Return a copy with the pending code cleared."""
        return self.model_copy(
            update={"phone_otp_hash": None, "phone_otp_expires_at": None}
        )

    def logged_in(self, at: datetime) -> "User":
        return self.model_copy(update={"last_login": at})
