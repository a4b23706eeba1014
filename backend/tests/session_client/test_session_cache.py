import pytest
from datetime import timedelta

from session_client.cache import SessionManager, TokenCache
from session_client.models import ANONYMOUS, SessionState, SessionUser
from session_client.storage import InMemoryTokenStorage

from conftest import FIXED_NOW, FixedClock


USER = SessionUser(id="user-123", name="Ada Lovelace", email="ada@example.com")
EXPIRES = FIXED_NOW + timedelta(hours=1)


class TestTokenCache:
    def test_starts_anonymous(self):
        cache = TokenCache()
        assert cache.get() is ANONYMOUS
        assert cache.get().authenticated is False

    def test_set_and_clear(self):
        cache = TokenCache()
        state = SessionState(token="t", expires_at=EXPIRES, authenticated=True)
        cache.set(state)
        assert cache.get() is state
        cache.clear()
        assert cache.get() is ANONYMOUS

    def test_is_expired(self):
        cache = TokenCache()
        assert cache.is_expired(FIXED_NOW) is False
        cache.set(SessionState(token="t", expires_at=EXPIRES, authenticated=True))
        assert cache.is_expired(EXPIRES) is False
        assert cache.is_expired(EXPIRES + timedelta(seconds=1)) is True


class TestSessionManager:
    @pytest.fixture
    def clock(self):
        return FixedClock()

    @pytest.fixture
    def storage(self):
        return InMemoryTokenStorage()

    @pytest.fixture
    def session(self, storage, clock):
        return SessionManager(storage, clock)

    def test_login_sets_state_and_persists(self, session, storage):
        state = session.login("token-1", EXPIRES, USER)

        assert session.is_authenticated
        assert session.state is state
        assert state.user == USER
        assert storage.read() == state

    def test_every_write_bumps_generation(self, session):
        start = session.generation
        session.login("token-1", EXPIRES, USER)
        session.refresh("token-2", EXPIRES)
        session.logout()
        assert session.generation == start + 3

    def test_logout_when_anonymous_keeps_generation(self, session):
        start = session.generation
        session.logout()
        assert session.generation == start

    def test_refresh_keeps_user(self, session, storage):
        session.login("token-1", EXPIRES, USER)
        later = EXPIRES + timedelta(hours=1)

        state = session.refresh("token-2", later)

        assert state.token == "token-2"
        assert state.expires_at == later
        assert state.user == USER
        assert storage.read().token == "token-2"

    def test_logout_clears_state_and_storage(self, session, storage):
        session.login("token-1", EXPIRES, USER)
        session.logout()

        assert session.state is ANONYMOUS
        assert storage.read() is None

    def test_states_are_replaced_not_mutated(self, session):
        first = session.login("token-1", EXPIRES, USER)
        session.refresh("token-2", EXPIRES)
        assert first.token == "token-1"

    def test_check_expiry(self, session, storage, clock):
        session.login("token-1", EXPIRES, USER)

        clock.now = EXPIRES
        assert session.check_expiry() is False
        assert session.is_authenticated

        clock.advance(1)
        assert session.check_expiry() is True
        assert session.state is ANONYMOUS
        assert storage.read() is None

    def test_bearer_token(self, session, clock):
        assert session.bearer_token() is None
        session.login("token-1", EXPIRES, USER)
        assert session.bearer_token() == "token-1"

        clock.now = EXPIRES + timedelta(seconds=1)
        assert session.bearer_token() is None
        # The stale state stays until something clears it
        assert session.state.token == "token-1"

    def test_restore(self, storage, clock):
        storage.write(SessionState(token="token-1", expires_at=EXPIRES, authenticated=True, user=USER))
        session = SessionManager(storage, clock)

        assert session.restore() is True
        assert session.bearer_token() == "token-1"
        assert session.state.user == USER

    def test_restore_drops_expired(self, storage, clock):
        storage.write(SessionState(token="token-1", expires_at=EXPIRES, authenticated=True))
        clock.now = EXPIRES + timedelta(seconds=1)
        session = SessionManager(storage, clock)

        assert session.restore() is False
        assert session.state is ANONYMOUS
        assert storage.read() is None

    def test_restore_empty(self, session):
        assert session.restore() is False


class FlakyStorage(InMemoryTokenStorage):
    """Storage whose delete fails a set number of times."""

    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    def delete(self) -> None:
        if self.failures:
            self.failures -= 1
            raise PermissionError("token file is read-only")
        super().delete()


class TestLogoutWithFailingStorage:
    def test_memory_is_cleared_when_delete_fails(self, caplog):
        storage = FlakyStorage()
        session = SessionManager(storage, FixedClock())
        session.login("token-1", EXPIRES, USER)
        generation = session.generation

        session.logout()

        assert session.state is ANONYMOUS
        assert session.bearer_token() is None
        assert session.generation == generation + 1
        assert "Could not remove the persisted session token" in caplog.text
        # The stale token is left behind until the next successful delete
        assert storage.read().token == "token-1"

        session.logout()
        assert storage.read() is None

    def test_new_session_after_failed_delete(self):
        storage = FlakyStorage()
        session = SessionManager(storage, FixedClock())
        session.login("token-1", EXPIRES, USER)
        session.logout()

        session.login("token-2", EXPIRES, USER)

        assert session.bearer_token() == "token-2"
        assert storage.read().token == "token-2"
