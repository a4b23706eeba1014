"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenClaims(BaseModel):
    """
    Decoded session token payload.

    Issued by modules.auth.tokens.TokenIssuer.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    phone: Optional[str] = Field(None, description="User's phone number")
    name: Optional[str] = Field(None, description="Display name")
    role: str = Field(default="user", description="User role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from token claims and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="User's email address")
    phone: Optional[str] = Field(None, description="User's phone number")
    role: str = Field(default="user", description="User role")
    expires_at: Optional[datetime] = Field(None, description="Token expiry")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }
