"""
User-related endpoints.

Provides the profile of the session's user, read from the bearer token.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from shared.models import AuthenticatedUser, CamelModel
from ..middleware.auth import get_current_user

router = APIRouter()


class UserProfileResponse(CamelModel):
    """User profile response model."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    session_expires_at: Optional[datetime] = None


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
) -> UserProfileResponse:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return UserProfileResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        session_expires_at=user.expires_at,
    )
