"""
One-time code generation and checking.

Codes are six digits drawn uniformly from [100000, 999999], so a leading
zero never occurs. Digests are plain SHA-256 of the code with no salt.
With only 900000 possible codes the digest is trivially reversible by
precomputation; the security of the scheme rests on the short TTL.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from modules.users.models import utc_now

from .models import OTPChallenge

OTP_MIN = 100_000
OTP_SPAN = 900_000
DEFAULT_OTP_TTL_SECONDS = 300


class OTPManager:
    """Generates, hashes and time-bounds one-time codes."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_OTP_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    @staticmethod
    def generate() -> str:
        return str(OTP_MIN + secrets.randbelow(OTP_SPAN))

    @staticmethod
    def hash(code: str) -> str:
        return hashlib.sha256(code.encode("utf-8")).hexdigest()

    def issue(self, ttl_seconds: Optional[int] = None) -> OTPChallenge:
        """Generate a code and compute its digest and absolute expiry."""
        ttl = self._ttl_seconds if ttl_seconds is None else ttl_seconds
        code = self.generate()
        return OTPChallenge(
            code=code,
            digest=self.hash(code),
            expires_at=self._clock() + timedelta(seconds=ttl),
        )

    def verify(
        self,
        code: str,
        digest: str,
        expires_at: datetime,
        now: Optional[datetime] = None,
    ) -> bool:
        """True iff the code matches the digest and now <= expires_at."""
        now = now or self._clock()
        matches = hmac.compare_digest(self.hash(code), digest)
        return matches and now <= expires_at

    @staticmethod
    def is_expired(expires_at: datetime, now: datetime) -> bool:
        return now > expires_at
