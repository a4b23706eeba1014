"""
Reactive re-authentication for outbound calls.

Each call is sent in two phases:

1. attempt(call): send with the current bearer token, or none if the
   session is missing or already expired.
2. on_auth_failure(call, response): on a 401, refresh once and replay the
   call once. `call.refresh_attempted` is set before refreshing, so a call
   can never trigger a second refresh or a second replay.

Only one refresh request is in flight at a time: calls that fail while a
refresh is running wait for that refresh's outcome. The refresh task is
shielded, so a caller abandoning its call does not cancel the refresh
halfway through; the session is updated in a single step when it lands.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from .cache import SessionManager
from .models import GrantPayload

logger = logging.getLogger(__name__)

UNAUTHORIZED = 401


@dataclass
class OutboundCall:
    """One logical request, possibly sent twice."""

    method: str
    url: str
    kwargs: dict[str, Any] = field(default_factory=dict)
    allow_refresh: bool = True
    refresh_attempted: bool = False
    sent_generation: int = -1


class ReauthInterceptor:
    """Wraps an httpx.AsyncClient with bearer injection and refresh-and-retry."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        session: SessionManager,
        refresh_path: str = "/auth/refresh-token",
    ):
        self._http = http
        self._session = session
        self._refresh_path = refresh_path
        self._refresh_task: Optional[asyncio.Task] = None

    async def send(self, method: str, url: str, allow_refresh: bool = True, **kwargs: Any) -> httpx.Response:
        """
        Send a request through the interceptor.

        Pass allow_refresh=False for calls where a 401 means bad credentials
        rather than a stale session (login, OTP verification).
        """
        call = OutboundCall(method=method, url=url, kwargs=kwargs, allow_refresh=allow_refresh)
        response = await self.attempt(call)
        if response.status_code == UNAUTHORIZED:
            response = await self.on_auth_failure(call, response)
        return response

    async def attempt(self, call: OutboundCall) -> httpx.Response:
        headers = dict(call.kwargs.get("headers") or {})
        token = self._session.bearer_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            headers.pop("Authorization", None)
        call.sent_generation = self._session.generation
        kwargs = {**call.kwargs, "headers": headers}
        return await self._http.request(call.method, call.url, **kwargs)

    async def on_auth_failure(self, call: OutboundCall, response: httpx.Response) -> httpx.Response:
        if not call.allow_refresh or call.refresh_attempted:
            return response
        call.refresh_attempted = True

        if self._session.generation != call.sent_generation:
            # The session changed while this call was in flight
            if not self._session.is_authenticated:
                return response
            return await self.attempt(call)

        if self._session.state.token is None:
            return response
        if not await self._refresh_once():
            return response
        return await self.attempt(call)

    async def _refresh_once(self) -> bool:
        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.create_task(self._refresh())
            self._refresh_task = task
        return await asyncio.shield(task)

    async def _refresh(self) -> bool:
        started_generation = self._session.generation
        token = self._session.state.token
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self._http.post(self._refresh_path, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Token refresh request failed: {e}")
            return self._settle(started_generation, None)

        if response.status_code != 200:
            logger.info(f"Token refresh rejected with {response.status_code}")
            return self._settle(started_generation, None)

        try:
            grant = GrantPayload.model_validate(response.json())
        except ValueError:
            logger.warning("Token refresh returned an unreadable body")
            return self._settle(started_generation, None)

        return self._settle(started_generation, grant)

    def _settle(self, started_generation: int, grant: Optional[GrantPayload]) -> bool:
        """Apply a refresh outcome unless the session changed while it ran."""
        if self._session.generation != started_generation:
            # Logged out or logged in again meanwhile; that state wins
            return self._session.is_authenticated
        if grant is None:
            self._session.logout()
            return False
        self._session.refresh(grant.token, grant.expires_at)
        return True
