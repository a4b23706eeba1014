"""
Async client for the Citizone auth API.

Every request goes through the ReauthInterceptor. Login and OTP
verification start a session in the SessionManager; the ExpiryMonitor
runs while the client is open.

Usage:
    async with CitizoneClient() as client:
        await client.login_by_email("ada@example.com", "secret1")
        profile = await client.get_profile()
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

import httpx

from .cache import SessionManager, utc_now
from .config import ClientSettings
from .exceptions import ApiError, SessionEndedError
from .interceptor import ReauthInterceptor
from .models import GrantPayload, SessionState
from .monitor import ExpiryMonitor
from .storage import FileTokenStorage, InMemoryTokenStorage, TokenStorage

logger = logging.getLogger(__name__)


def default_storage(settings: ClientSettings) -> TokenStorage:
    if settings.token_file:
        return FileTokenStorage(settings.token_file)
    return InMemoryTokenStorage()


class CitizoneClient:
    """High-level client; owns the session and its expiry monitor."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        http: Optional[httpx.AsyncClient] = None,
        storage: Optional[TokenStorage] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._settings = settings or ClientSettings()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout_seconds,
        )
        self.session = SessionManager(storage or default_storage(self._settings), clock)
        self._interceptor = ReauthInterceptor(self._http, self.session, self._settings.refresh_path)
        self._monitor = ExpiryMonitor(self.session, self._settings.expiry_check_interval_seconds)

    async def __aenter__(self) -> "CitizoneClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self.session.restore():
            logger.info("Restored persisted session")
        self._monitor.start()

    async def close(self) -> None:
        await self._monitor.stop()
        if self._owns_http:
            await self._http.aclose()

    @property
    def state(self) -> SessionState:
        return self.session.state

    # -------------------------------------------------------------------------
    # Auth endpoints
    # -------------------------------------------------------------------------

    async def register_by_email(
        self,
        first_name: str,
        last_name: str,
        age: int,
        gender: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> dict[str, Any]:
        """Register and return the public profile. Does not log in."""
        response = await self._interceptor.send(
            "POST",
            "/auth/register/email",
            allow_refresh=False,
            json={
                "firstName": first_name,
                "lastName": last_name,
                "age": age,
                "gender": gender,
                "email": email,
                "password": password,
                "confirmPassword": confirm_password,
            },
        )
        return self._data(response)

    async def login_by_email(self, email: str, password: str) -> SessionState:
        response = await self._interceptor.send(
            "POST",
            "/auth/login/email",
            allow_refresh=False,
            json={"email": email, "password": password},
        )
        return self._start_session(self._data(response))

    async def send_otp(self, phone: str, name: Optional[str] = None) -> str:
        """Request a code; returns the server's acknowledgement message."""
        body: dict[str, Any] = {"phone": phone}
        if name:
            body["name"] = name
        response = await self._interceptor.send(
            "POST", "/auth/mobile/send-otp", allow_refresh=False, json=body
        )
        self._raise_for_failure(response)
        return response.json().get("message", "")

    async def verify_otp(self, phone: str, otp: str) -> SessionState:
        response = await self._interceptor.send(
            "POST",
            "/auth/mobile/verify-otp",
            allow_refresh=False,
            json={"phone": phone, "otp": otp},
        )
        return self._start_session(self._data(response))

    async def get_profile(self) -> dict[str, Any]:
        """Fetch the session user's profile (a protected call)."""
        response = await self.request("GET", "/users/me")
        self._raise_for_failure(response)
        return response.json()

    def logout(self) -> None:
        self.session.logout()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send any request with bearer injection and refresh-and-retry."""
        was_authenticated = self.session.is_authenticated
        response = await self._interceptor.send(method, url, **kwargs)
        if response.status_code == 401 and was_authenticated and not self.session.is_authenticated:
            raise SessionEndedError(message=self._message(response))
        return response

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _start_session(self, data: dict[str, Any]) -> SessionState:
        grant = GrantPayload.model_validate(data)
        return self.session.login(grant.token, grant.expires_at, grant.user)

    def _data(self, response: httpx.Response) -> dict[str, Any]:
        self._raise_for_failure(response)
        return response.json().get("data") or {}

    def _raise_for_failure(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = self._body(response)
        raise ApiError(response.status_code, self._message(response), body.get("error"))

    def _message(self, response: httpx.Response) -> str:
        return self._body(response).get("message") or response.reason_phrase or "Request failed"

    @staticmethod
    def _body(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
