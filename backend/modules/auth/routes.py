"""
Authentication API endpoints.

Email registration and login, phone one-time-code sign-in, and session
token refresh. Domain errors propagate to the app's exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies import get_auth_service
from api.middleware.auth import bearer_scheme

from .interfaces import IAuthService
from .models import (
    ApiResponse,
    EmailLoginResult,
    LoginEmailRequest,
    OTPVerificationResult,
    RefreshedToken,
    RegisterEmailRequest,
    RegisteredUser,
    SendOTPRequest,
    VerifyOTPRequest,
)

router = APIRouter()


@router.post("/register/email", response_model=ApiResponse[RegisteredUser], status_code=201)
async def register_by_email(
    request: RegisterEmailRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse[RegisteredUser]:
    """
    Register a user with email and password.

    Returns the public profile only; the password hash never leaves the server.
    """
    user = await service.register_by_email(request)
    return ApiResponse(message="User registered successfully", data=user)


@router.post("/login/email", response_model=ApiResponse[EmailLoginResult])
async def login_by_email(
    request: LoginEmailRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse[EmailLoginResult]:
    """Log in with email and password."""
    result = await service.login_by_email(request)
    return ApiResponse(message="Login successful", data=result)


@router.post("/mobile/send-otp", response_model=ApiResponse[None])
async def send_otp(
    request: SendOTPRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse[None]:
    """
    Send a one-time code to a phone number.

    A name is required the first time a phone number is seen.
    """
    result = await service.mobile_auth(request)
    return ApiResponse(message=result.message)


@router.post("/mobile/verify-otp", response_model=ApiResponse[OTPVerificationResult])
async def verify_otp(
    request: VerifyOTPRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse[OTPVerificationResult]:
    """Verify a one-time code and start a session."""
    result = await service.verify_otp(request)
    return ApiResponse(message="Login successful", data=result)


@router.post("/refresh-token", response_model=RefreshedToken)
async def refresh_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: IAuthService = Depends(get_auth_service),
) -> RefreshedToken:
    """
    Exchange the bearer token for a fresh one.

    Accepts tokens that expired within the configured grace window.
    """
    token = credentials.credentials if credentials else None
    return await service.refresh_session(token)
