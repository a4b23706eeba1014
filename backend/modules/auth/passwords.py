"""
Password hashing with bcrypt.

bcrypt salts every digest and its cost factor makes brute force expensive;
checkpw compares in constant time. Both calls are CPU-bound, so they run
in a worker thread and only the awaiting request is suspended.

A dummy digest is checked when the account does not exist, so a login for
an unknown email costs the same as one with a wrong password.
"""

import asyncio
import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """One-way password hashing and constant-effort comparison."""

    def __init__(self, rounds: int = 12):
        self._rounds = rounds
        self._dummy_hash: bytes | None = None

    def hash_sync(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._encode(plaintext), salt).decode("ascii")

    def compare_sync(self, plaintext: str, digest: str | None) -> bool:
        if not digest:
            bcrypt.checkpw(self._encode(plaintext), self._get_dummy_hash())
            return False
        try:
            return bcrypt.checkpw(self._encode(plaintext), digest.encode("ascii"))
        except ValueError:
            logger.warning("Stored password digest is not a valid bcrypt hash")
            return False

    async def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh salt."""
        return await asyncio.to_thread(self.hash_sync, plaintext)

    async def compare(self, plaintext: str, digest: str | None) -> bool:
        """
        Check a password against a stored digest.

        A missing digest still pays for one bcrypt check and returns False.
        """
        return await asyncio.to_thread(self.compare_sync, plaintext, digest)

    def _get_dummy_hash(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"citizone-dummy-password", bcrypt.gensalt(rounds=self._rounds))
        return self._dummy_hash

    @staticmethod
    def _encode(plaintext: str) -> bytes:
        return plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES]
