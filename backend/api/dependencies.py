"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations from Settings.
"""

import logging
import secrets
from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, ISmsSender
    from modules.auth.otp import OTPManager
    from modules.auth.passwords import PasswordHasher
    from modules.auth.tokens import TokenIssuer
    from modules.users.interfaces import ICredentialStore

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._store: "ICredentialStore | None" = None
        self._hasher: "PasswordHasher | None" = None
        self._otp: "OTPManager | None" = None
        self._tokens: "TokenIssuer | None" = None
        self._sms: "ISmsSender | None" = None
        self._auth_service: "IAuthService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> "ICredentialStore":
        """Get the credential store (Supabase when configured, else in-memory)."""
        if self._store is None:
            if self.settings.supabase_url:
                from modules.users.repository import SupabaseCredentialStore
                from shared.database import get_supabase_client
                self._store = SupabaseCredentialStore(
                    get_supabase_client(self.settings), table=self.settings.users_table
                )
            else:
                from modules.users.repository import InMemoryCredentialStore
                logger.warning("SUPABASE_URL not set; users are kept in memory only")
                self._store = InMemoryCredentialStore()
        return self._store

    @property
    def hasher(self) -> "PasswordHasher":
        if self._hasher is None:
            from modules.auth.passwords import PasswordHasher
            self._hasher = PasswordHasher(rounds=self.settings.bcrypt_rounds)
        return self._hasher

    @property
    def otp(self) -> "OTPManager":
        if self._otp is None:
            from modules.auth.otp import OTPManager
            self._otp = OTPManager(ttl_seconds=self.settings.otp_ttl_seconds)
        return self._otp

    @property
    def tokens(self) -> "TokenIssuer":
        """
        Get the token issuer.

        Without JWT_SECRET, debug mode signs with a per-process random secret
        and any other mode refuses to start.
        """
        if self._tokens is None:
            from modules.auth.tokens import TokenIssuer
            secret = self.settings.jwt_secret
            if not secret:
                if not self.settings.debug:
                    raise RuntimeError(
                        "JWT_SECRET is not set. Configure it, or set DEBUG=true "
                        "to use a temporary development secret."
                    )
                logger.warning("JWT_SECRET not set; using a temporary secret for this process")
                secret = secrets.token_urlsafe(48)
            self._tokens = TokenIssuer(
                secret=secret,
                ttl_seconds=self.settings.access_token_ttl_seconds,
                refresh_grace_seconds=self.settings.refresh_grace_seconds,
                algorithm=self.settings.jwt_algorithm,
            )
        return self._tokens

    @property
    def sms(self) -> "ISmsSender":
        """Get the SMS sender (Twilio when configured, else log-only)."""
        if self._sms is None:
            from modules.auth.sms import LoggingSmsSender, TwilioSmsSender
            settings = self.settings
            if settings.twilio_account_sid and settings.twilio_auth_token:
                self._sms = TwilioSmsSender(
                    account_sid=settings.twilio_account_sid,
                    auth_token=settings.twilio_auth_token,
                    from_number=settings.twilio_from_number,
                    country_code=settings.sms_country_code,
                    ttl_minutes=max(1, settings.otp_ttl_seconds // 60),
                )
            else:
                self._sms = LoggingSmsSender()
        return self._sms

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                store=self.store,
                hasher=self.hasher,
                otp=self.otp,
                tokens=self.tokens,
                sms=self.sms,
            )
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._store = None
        self._hasher = None
        self._otp = None
        self._tokens = None
        self._sms = None
        self._auth_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_token_issuer() -> "TokenIssuer":
    """FastAPI dependency for the session token issuer."""
    return get_container().tokens
