import asyncio
from datetime import timedelta

import pytest

from session_client.cache import SessionManager
from session_client.models import ANONYMOUS
from session_client.monitor import ExpiryMonitor
from session_client.storage import InMemoryTokenStorage

from conftest import FIXED_NOW, FixedClock


EXPIRES = FIXED_NOW + timedelta(hours=1)


class TestExpiryMonitor:
    @pytest.fixture
    def clock(self):
        return FixedClock()

    @pytest.fixture
    def session(self, clock):
        session = SessionManager(clock=clock)
        session.login("token-1", EXPIRES, None)
        return session

    def test_rejects_non_positive_interval(self, session):
        with pytest.raises(ValueError):
            ExpiryMonitor(session, interval_seconds=0)

    def test_tick_leaves_live_session(self, session):
        monitor = ExpiryMonitor(session)
        assert monitor.tick() is False
        assert session.is_authenticated

    def test_tick_clears_expired_session(self, session, clock):
        monitor = ExpiryMonitor(session)
        clock.now = EXPIRES + timedelta(seconds=1)

        assert monitor.tick() is True
        assert session.state is ANONYMOUS

    @pytest.mark.asyncio
    async def test_runs_without_any_requests(self, session, clock):
        """The session is cleared by the timer alone."""
        monitor = ExpiryMonitor(session, interval_seconds=0.01)
        monitor.start()
        try:
            clock.now = EXPIRES + timedelta(seconds=1)
            for _ in range(50):
                if not session.is_authenticated:
                    break
                await asyncio.sleep(0.01)
            assert session.state is ANONYMOUS
        finally:
            await monitor.stop()

    @pytest.mark.asyncio
    async def test_start_is_idempotent_and_stop_cancels(self, session):
        monitor = ExpiryMonitor(session, interval_seconds=10)
        monitor.start()
        task = monitor._task
        monitor.start()
        assert monitor._task is task
        assert monitor.running

        await monitor.stop()
        assert not monitor.running
        await monitor.stop()  # stopping twice is fine

    @pytest.mark.asyncio
    async def test_failed_check_does_not_stop_the_monitor(self, session, clock, caplog):
        real_check = session.check_expiry
        calls = []

        def check_expiry():
            calls.append(1)
            if len(calls) == 1:
                raise PermissionError("token file is read-only")
            return real_check()

        session.check_expiry = check_expiry
        monitor = ExpiryMonitor(session, interval_seconds=0.01)
        monitor.start()
        try:
            for _ in range(50):
                if len(calls) > 1:
                    break
                await asyncio.sleep(0.01)
            assert monitor.running
            assert "Session expiry check failed" in caplog.text

            clock.now = EXPIRES + timedelta(seconds=1)
            for _ in range(50):
                if not session.is_authenticated:
                    break
                await asyncio.sleep(0.01)
            assert session.state is ANONYMOUS
        finally:
            await monitor.stop()

    @pytest.mark.asyncio
    async def test_keeps_expiring_sessions_after_storage_failure(self, clock):
        storage = FailingDeleteStorage()
        session = SessionManager(storage, clock)
        session.login("token-1", EXPIRES, None)
        monitor = ExpiryMonitor(session, interval_seconds=0.01)
        monitor.start()
        try:
            clock.now = EXPIRES + timedelta(seconds=1)
            await wait_until(lambda: not session.is_authenticated)
            assert storage.failures == 0

            session.login("token-2", clock.now + timedelta(hours=1), None)
            clock.advance(3601)
            await wait_until(lambda: not session.is_authenticated)

            assert monitor.running
            assert session.state is ANONYMOUS
            assert storage.read() is None
        finally:
            await monitor.stop()


class FailingDeleteStorage(InMemoryTokenStorage):
    def __init__(self):
        super().__init__()
        self.failures = 1

    def delete(self) -> None:
        if self.failures:
            self.failures -= 1
            raise PermissionError("token file is read-only")
        super().delete()


async def wait_until(condition, attempts: int = 50) -> None:
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0.01)
