"""
Proactive session expiry.

The monitor checks the session on a fixed interval whether or not any
requests are being made, and logs the user out once the token expires.
"""

import asyncio
import contextlib
import logging
from typing import Optional

from .cache import SessionManager

logger = logging.getLogger(__name__)


class ExpiryMonitor:
    """Periodic expiry check for a SessionManager."""

    def __init__(self, session: SessionManager, interval_seconds: float = 60.0):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._session = session
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> bool:
        """Run one check. Returns True if the session was cleared."""
        return self._session.check_expiry()

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception:
                logger.exception("Session expiry check failed")

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self.run())
        logger.debug(f"Expiry monitor started ({self._interval}s interval)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
