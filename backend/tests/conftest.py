"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
import jwt  # PyJWT

# The api package wires the auth routes; import it before anything pulls
# in modules.auth.routes directly.
from api.dependencies import reset_container
from modules.auth.models import DeliveryReceipt
from modules.auth.otp import OTPManager
from modules.auth.passwords import PasswordHasher
from modules.auth.service import AuthService
from modules.auth.tokens import TokenIssuer
from modules.users.repository import InMemoryCredentialStore
from shared.config import Settings, get_settings


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeSmsSender:
    """Records every code instead of sending it."""

    def __init__(self, accepted: bool = True, error: Optional[Exception] = None):
        self.sent: list[tuple[str, str]] = []
        self.accepted = accepted
        self.error = error

    async def send(self, phone: str, code: str) -> DeliveryReceipt:
        self.sent.append((phone, code))
        if self.error is not None:
            raise self.error
        if not self.accepted:
            return DeliveryReceipt(accepted=False, error="undeliverable")
        return DeliveryReceipt(accepted=True, reference="fake")

    def last_code(self, phone: str) -> str:
        return [code for to, code in self.sent if to == phone][-1]


def create_test_token(
    user_id: str = "test-user-123",
    email: Optional[str] = "test@example.com",
    phone: Optional[str] = None,
    issued_at: Optional[datetime] = None,
    ttl_seconds: int = 3600,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a session token the way TokenIssuer signs them.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        phone: Phone to include in the token
        issued_at: Issue time; defaults to now
        ttl_seconds: Seconds until expiry (negative for an expired token)
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "phone": phone,
        "name": "Test User",
        "role": "user",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container and settings cache around each test."""
    reset_container()
    get_settings.cache_clear()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, jwt_secret=TEST_JWT_SECRET, bcrypt_rounds=4)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def hasher() -> PasswordHasher:
    """Low-cost bcrypt so the suite stays fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def otp(clock) -> OTPManager:
    return OTPManager(ttl_seconds=300, clock=clock)


@pytest.fixture
def tokens(clock) -> TokenIssuer:
    return TokenIssuer(
        secret=TEST_JWT_SECRET,
        ttl_seconds=3600,
        refresh_grace_seconds=7 * 24 * 3600,
        clock=clock,
    )


@pytest.fixture
def sms() -> FakeSmsSender:
    return FakeSmsSender()


@pytest.fixture
def auth_service(store, hasher, otp, tokens, sms, clock) -> AuthService:
    return AuthService(
        store=store,
        hasher=hasher,
        otp=otp,
        tokens=tokens,
        sms=sms,
        clock=clock,
    )
