"""
Users module.

Owns the User record and the credential store abstraction.

Public API:
- ICredentialStore: Interface for user persistence
- User, Gender, Role: Identity record and enums
- InMemoryCredentialStore, SupabaseCredentialStore: Store implementations
- DuplicateIdentityError, UserNotFoundError
"""

from .interfaces import ICredentialStore
from .models import User, Gender, Role
from .repository import InMemoryCredentialStore, SupabaseCredentialStore
from .exceptions import DuplicateIdentityError, UserNotFoundError

__all__ = [
    "ICredentialStore",
    "User",
    "Gender",
    "Role",
    "InMemoryCredentialStore",
    "SupabaseCredentialStore",
    "DuplicateIdentityError",
    "UserNotFoundError",
]
