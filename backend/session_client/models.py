"""
Session client data models.

SessionState is immutable: every change replaces the whole state, so a
reader never sees a token from one session paired with the expiry of
another.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SessionUser(WireModel):
    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class SessionState(WireModel):
    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    authenticated: bool = False
    user: Optional[SessionUser] = None

    model_config = ConfigDict(frozen=True)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at


ANONYMOUS = SessionState()


class GrantPayload(WireModel):
    """The token part of a login, verify-otp or refresh response."""

    token: str
    expires_at: datetime
    user: Optional[SessionUser] = None

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Compared against an aware clock
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
