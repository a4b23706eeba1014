"""
Citizone session client.

Consumer-side session handling for the Citizone auth API.

Public API:
- CitizoneClient: High-level async client
- SessionManager, TokenCache: Session state (single writer / pure holder)
- ExpiryMonitor: Periodic proactive expiry
- ReauthInterceptor: Refresh-and-retry wrapper around httpx
- TokenStorage, InMemoryTokenStorage, FileTokenStorage: Persistence port
- ApiError, SessionEndedError
"""

from .cache import SessionManager, TokenCache
from .client import CitizoneClient
from .config import ClientSettings
from .exceptions import ApiError, SessionEndedError
from .interceptor import OutboundCall, ReauthInterceptor
from .models import SessionState, SessionUser
from .monitor import ExpiryMonitor
from .storage import FileTokenStorage, InMemoryTokenStorage, TokenStorage

__all__ = [
    "CitizoneClient",
    "ClientSettings",
    "SessionManager",
    "TokenCache",
    "ExpiryMonitor",
    "ReauthInterceptor",
    "OutboundCall",
    "SessionState",
    "SessionUser",
    "TokenStorage",
    "InMemoryTokenStorage",
    "FileTokenStorage",
    "ApiError",
    "SessionEndedError",
]
