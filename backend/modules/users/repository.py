"""
Credential store implementations.

- InMemoryCredentialStore: dict-backed store for tests and local development
- SupabaseCredentialStore: `users` table with unique indexes on email and phone

Neither store checks the existence of an identity before writing on behalf
of the caller: uniqueness is enforced at write time and surfaced as
DuplicateIdentityError, which is the only backstop against two concurrent
registrations for the same email.
"""

import logging
import threading
import uuid
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository
from .exceptions import DuplicateIdentityError, UserNotFoundError
from .models import User

logger = logging.getLogger(__name__)

# Postgres error code for unique_violation
UNIQUE_VIOLATION = "23505"


class InMemoryCredentialStore:
    """
    Credential store holding users in process memory.

    Users are frozen models, so callers can never mutate stored state
    without going through save().
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._find("email", email)

    def find_by_phone(self, phone: str) -> Optional[User]:
        with self._lock:
            return self._find("phone", phone)

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def create(self, user: User) -> User:
        with self._lock:
            self._check_unique(user, exclude_id=None)
            created = user.model_copy(update={"id": str(uuid.uuid4())})
            self._users[created.id] = created
            return created

    def save(self, user: User) -> User:
        with self._lock:
            existing = self._users.get(user.id) if user.id else None
            if existing is None:
                raise UserNotFoundError(user.id or "<unsaved>")
            self._check_unique(user, exclude_id=user.id)
            saved = user.model_copy(update={"registered_at": existing.registered_at})
            self._users[saved.id] = saved
            return saved

    def __len__(self) -> int:
        return len(self._users)

    def _find(self, field: str, value: str) -> Optional[User]:
        for user in self._users.values():
            if getattr(user, field) == value:
                return user
        return None

    def _check_unique(self, user: User, exclude_id: Optional[str]) -> None:
        for field in ("email", "phone"):
            value = getattr(user, field)
            if value is None:
                continue
            other = self._find(field, value)
            if other is not None and other.id != exclude_id:
                raise DuplicateIdentityError(field)


class SupabaseCredentialStore(BaseRepository[User]):
    """
    Credential store backed by a Supabase `users` table.

    Expected schema: one column per User field (snake_case), `id` as a
    generated UUID primary key, unique indexes on `email` and `phone`.
    """

    def __init__(self, db: Client, table: str = "users") -> None:
        super().__init__(db, table)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._find_one("email", email)

    def find_by_phone(self, phone: str) -> Optional[User]:
        return self._find_one("phone", phone)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._find_one("id", user_id)

    def create(self, user: User) -> User:
        row = self._to_row(user, exclude={"id"})
        try:
            result = self._query().insert(row).execute()
        except APIError as e:
            raise self._translate(e)
        return self._map_row(result.data[0])

    def save(self, user: User) -> User:
        if not user.id:
            raise UserNotFoundError("<unsaved>")
        row = self._to_row(user, exclude={"id", "registered_at"})
        try:
            result = self._query().update(row).eq("id", user.id).execute()
        except APIError as e:
            raise self._translate(e)
        saved = self._first(result.data)
        if saved is None:
            raise UserNotFoundError(user.id)
        return saved

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _find_one(self, column: str, value: str) -> Optional[User]:
        result = self._query().select("*").eq(column, value).limit(1).execute()
        return self._first(result.data)

    def _to_row(self, user: User, exclude: set[str]) -> dict[str, Any]:
        return user.model_dump(mode="json", exclude=exclude)

    def _map_row(self, row: dict[str, Any]) -> User:
        data = dict(row)
        data["id"] = str(data["id"])
        return User.model_validate(data)

    def _translate(self, error: APIError) -> Exception:
        if error.code != UNIQUE_VIOLATION:
            return error
        text = f"{error.message} {error.details}"
        field = "phone" if "phone" in text else "email"
        logger.info(f"Unique constraint rejected write on {field}")
        return DuplicateIdentityError(field)
