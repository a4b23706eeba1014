"""
Client-side session state.

- TokenCache: pure in-memory holder with set/clear/is_expired, no I/O
- SessionManager: the single writer; applies each state change to the
  cache and mirrors it to the storage port

Every write replaces the whole SessionState in one assignment.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .models import ANONYMOUS, SessionState, SessionUser
from .storage import InMemoryTokenStorage, TokenStorage

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCache:
    """Holds the current session; knows nothing about storage or HTTP."""

    def __init__(self) -> None:
        self._state: SessionState = ANONYMOUS

    def get(self) -> SessionState:
        return self._state

    def set(self, state: SessionState) -> None:
        self._state = state

    def clear(self) -> None:
        self._state = ANONYMOUS

    def is_expired(self, now: datetime) -> bool:
        return self._state.is_expired(now)


class SessionManager:
    """
    Owns the token cache.

    Other components read `state` and call the transitions below; none of
    them touch the cache directly. `generation` increases on every write so
    callers can tell whether the session changed under them.
    """

    def __init__(
        self,
        storage: Optional[TokenStorage] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._cache = TokenCache()
        self._storage = storage or InMemoryTokenStorage()
        self._clock = clock
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._cache.get()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_authenticated(self) -> bool:
        return self.state.authenticated

    def now(self) -> datetime:
        return self._clock()

    def login(self, token: str, expires_at: datetime, user: Optional[SessionUser]) -> SessionState:
        """Start a session from a successful login or OTP verification."""
        state = SessionState(token=token, expires_at=expires_at, authenticated=True, user=user)
        self._replace(state)
        self._storage.write(state)
        return state

    def refresh(self, token: str, expires_at: datetime) -> SessionState:
        """Swap in a refreshed token, keeping the user snapshot."""
        state = SessionState(
            token=token,
            expires_at=expires_at,
            authenticated=True,
            user=self.state.user,
        )
        self._replace(state)
        self._storage.write(state)
        return state

    def logout(self) -> None:
        """End the session and remove the persisted token."""
        if self.state is not ANONYMOUS:
            self._generation += 1
        self._cache.clear()
        try:
            self._storage.delete()
        except Exception:
            logger.exception("Could not remove the persisted session token")

    def check_expiry(self, now: Optional[datetime] = None) -> bool:
        """Clear the session if it is past its expiry. Returns True if cleared."""
        if not self._cache.is_expired(now or self._clock()):
            return False
        logger.info("Session expired; logging out")
        self.logout()
        return True

    def bearer_token(self, now: Optional[datetime] = None) -> Optional[str]:
        """The token to send, or None when there is no live session."""
        state = self.state
        if not state.authenticated or state.is_expired(now or self._clock()):
            return None
        return state.token

    def restore(self) -> bool:
        """Load an unexpired session from storage. Returns True if one was restored."""
        stored = self._storage.read()
        if stored is None or not stored.authenticated or not stored.token:
            return False
        if stored.is_expired(self._clock()):
            self._storage.delete()
            return False
        self._replace(stored)
        return True

    def _replace(self, state: SessionState) -> None:
        self._generation += 1
        self._cache.set(state)
