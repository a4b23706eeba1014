import os
import stat
from datetime import datetime, timezone

from session_client.models import SessionState, SessionUser
from session_client.storage import FileTokenStorage, InMemoryTokenStorage, TokenStorage


STATE = SessionState(
    token="token-1",
    expires_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
    authenticated=True,
    user=SessionUser(id="user-123", name="Ada", phone="5551234567"),
)


class TestInMemoryTokenStorage:
    def test_round_trip(self):
        storage = InMemoryTokenStorage()
        assert isinstance(storage, TokenStorage)
        assert storage.read() is None
        storage.write(STATE)
        assert storage.read() == STATE
        storage.delete()
        assert storage.read() is None


class TestFileTokenStorage:
    def test_implements_port(self, tmp_path):
        assert isinstance(FileTokenStorage(tmp_path / "session.json"), TokenStorage)

    def test_write_and_read(self, tmp_path):
        storage = FileTokenStorage(tmp_path / "session.json")
        storage.write(STATE)

        assert storage.read() == STATE
        assert '"expiresAt"' in storage.path.read_text()

    def test_file_is_private(self, tmp_path):
        storage = FileTokenStorage(tmp_path / "session.json")
        storage.write(STATE)

        mode = stat.S_IMODE(os.stat(storage.path).st_mode)
        assert mode == 0o600

    def test_creates_parent_directories(self, tmp_path):
        storage = FileTokenStorage(tmp_path / "nested" / "dir" / "session.json")
        storage.write(STATE)
        assert storage.read() == STATE

    def test_read_missing_file(self, tmp_path):
        assert FileTokenStorage(tmp_path / "missing.json").read() is None

    def test_read_corrupt_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert FileTokenStorage(path).read() is None

    def test_read_wrong_shape(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text('{"expiresAt": "yesterday"}')
        assert FileTokenStorage(path).read() is None

    def test_delete(self, tmp_path):
        storage = FileTokenStorage(tmp_path / "session.json")
        storage.write(STATE)
        storage.delete()

        assert not storage.path.exists()
        storage.delete()  # deleting twice is fine
