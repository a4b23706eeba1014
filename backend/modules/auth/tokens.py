"""
Session token issuing and validation.

Tokens are HS256 JWTs signed with Settings.jwt_secret. A token is usable
for authenticated calls until `exp`; the refresh endpoint also accepts a
token up to `refresh_grace_seconds` past its expiry.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
from pydantic import ValidationError as PydanticValidationError

from modules.users.models import User, utc_now
from shared.models import AuthenticatedUser, TokenClaims

from .exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from .models import SessionGrant, UserSnapshot


def snapshot_of(user: User) -> UserSnapshot:
    return UserSnapshot(
        id=user.id,
        name=user.full_name,
        email=user.email,
        phone=user.phone,
    )


class TokenIssuer:
    """Signs and validates session tokens."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        refresh_grace_seconds: int = 7 * 24 * 3600,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ValueError("A JWT secret is required to issue session tokens")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._refresh_grace_seconds = refresh_grace_seconds
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user: User) -> SessionGrant:
        """Create a session grant for a stored user."""
        now = self._clock().replace(microsecond=0)
        expires_at = now + timedelta(seconds=self._ttl_seconds)
        snapshot = snapshot_of(user)
        claims = TokenClaims(
            sub=user.id,
            email=user.email,
            phone=user.phone,
            name=snapshot.name,
            role=user.role.value,
            iat=int(now.timestamp()),
            exp=int(expires_at.timestamp()),
        )
        token = jwt.encode(claims.model_dump(), self._secret, algorithm=self._algorithm)
        return SessionGrant(token=token, expires_at=expires_at, user=snapshot)

    def decode(self, token: str | None, allow_expired_for_refresh: bool = False) -> TokenClaims:
        """
        Validate a token and return its claims.

        Raises:
            MissingTokenError: Empty token
            ExpiredTokenError: Past expiry (plus grace when refreshing)
            InvalidTokenError: Bad signature or malformed token
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "exp", "iat"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

        try:
            claims = TokenClaims(**payload)
        except PydanticValidationError:
            raise InvalidTokenError("Token claims are malformed")
        # Expiry is checked against the injected clock, not PyJWT's wall clock
        leeway = self._refresh_grace_seconds if allow_expired_for_refresh else 0
        now = int(self._clock().timestamp())
        if now > claims.exp + leeway:
            raise ExpiredTokenError()
        return claims

    def authenticate(self, token: str | None) -> AuthenticatedUser:
        """Validate an access token and return the user it names."""
        claims = self.decode(token)
        return AuthenticatedUser(
            id=claims.sub,
            name=claims.name,
            email=claims.email,
            phone=claims.phone,
            role=claims.role,
            expires_at=datetime.fromtimestamp(claims.exp, tz=timezone.utc),
        )
