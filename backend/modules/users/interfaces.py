"""
Users module interface.

The auth service depends on ICredentialStore, never on a database client.
Tests substitute InMemoryCredentialStore; production uses the Supabase store.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import User


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Persistence contract for user records.

    Implementations enforce uniqueness of email and phone and apply no
    other policy.
    """

    def find_by_email(self, email: str) -> Optional[User]:
        """
        Look up a user by normalized email.

        Returns:
            User if found, None otherwise
        """
        ...

    def find_by_phone(self, phone: str) -> Optional[User]:
        """
        Look up a user by 10-digit phone number.

        Returns:
            User if found, None otherwise
        """
        ...

    def find_by_id(self, user_id: str) -> Optional[User]:
        """
        Look up a user by store-assigned ID.

        Returns:
            User if found, None otherwise
        """
        ...

    def create(self, user: User) -> User:
        """
        Persist a new user and assign its ID.

        Raises:
            DuplicateIdentityError: If the email or phone is already taken
        """
        ...

    def save(self, user: User) -> User:
        """
        Replace a stored user with this snapshot.

        registered_at is never overwritten.

        Raises:
            DuplicateIdentityError: If the email or phone is already taken
            UserNotFoundError: If the user was never created
        """
        ...
