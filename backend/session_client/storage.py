"""
Token persistence for the session client.

The storage port is where the session manager's side effects go: it is
written on login and refresh and deleted on logout or expiry, so the
session survives a restart the way a browser cookie survives a reload.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from .models import SessionState

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenStorage(Protocol):
    """Side-effect port for persisting the session."""

    def write(self, state: SessionState) -> None:
        ...

    def read(self) -> Optional[SessionState]:
        ...

    def delete(self) -> None:
        ...


class InMemoryTokenStorage:
    """Storage that lives as long as the process."""

    def __init__(self) -> None:
        self._state: Optional[SessionState] = None

    def write(self, state: SessionState) -> None:
        self._state = state

    def read(self) -> Optional[SessionState]:
        return self._state

    def delete(self) -> None:
        self._state = None


class FileTokenStorage:
    """
    Storage in a JSON file readable only by the current user.

    Writes go to a temporary file and are renamed into place.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, state: SessionState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(state.model_dump_json(by_alias=True))
        os.chmod(tmp, 0o600)
        os.replace(tmp, self._path)

    def read(self) -> Optional[SessionState]:
        if not self._path.exists():
            return None
        try:
            return SessionState.model_validate(json.loads(self._path.read_text()))
        except ValueError:
            logger.warning(f"Ignoring unreadable session file {self._path}")
            return None

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)
