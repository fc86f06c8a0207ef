"""Authenticated async HTTP client for the idea service.

Every request carries the bearer credential (when one is stored) and the
tunnel pass-through header. A 401/403 on an authenticated request triggers a
single-flight credential refresh followed by exactly one retry; when the
session cannot be recovered the credentials are cleared, the user is sent to
the login surface, and the failed response is still returned to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ideaforge.auth.navigation import LoginNavigator
from ideaforge.auth.singleflight import SingleFlight
from ideaforge.config import DEFAULT_API_URL, Config
from ideaforge.events.bus import EventBus
from ideaforge.events.types import EventType
from ideaforge.models.tokens import TokenPair
from ideaforge.storage.base import CredentialKind, CredentialStore
from ideaforge.storage.memory import MemoryCredentialStore
from ideaforge.storage.sqlite_store import open_credential_store

logger = logging.getLogger(__name__)

TUNNEL_HEADER = "ngrok-skip-browser-warning"
REFRESH_PATH = "/api/auth/refresh"
AUTH_FAILURE_STATUSES = frozenset({401, 403})
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})
JSON_MEDIA_TYPE = "application/json"


def is_auth_failure(response: httpx.Response) -> bool:
    return response.status_code in AUTH_FAILURE_STATUSES


class AuthenticatedClient:
    """Bearer-authenticated client with coalesced token refresh."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        store: CredentialStore | None = None,
        event_bus: EventBus | None = None,
        navigator: LoginNavigator | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.store = store if store is not None else MemoryCredentialStore()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.navigator = navigator if navigator is not None else LoginNavigator(self.event_bus)
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._refresh_flight: SingleFlight[str | None] = SingleFlight("credential refresh")

    @classmethod
    async def from_config(cls, config: Config, **kwargs: Any) -> AuthenticatedClient:
        """Build a client with the durable credential store under ``config.home_path``."""
        if "store" not in kwargs:
            kwargs["store"] = await open_credential_store(config.credentials_db_path)
        return cls(config.base_url, timeout=config.request_timeout, **kwargs)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
        await self.store.close()

    async def __aenter__(self) -> AuthenticatedClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_flight.in_flight

    def resolve_url(self, path: str) -> str:
        """Absolute http(s) URLs pass through; anything else hangs off ``base_url``."""
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def _build_headers(
        self,
        headers: Mapping[str, str] | None,
        method: str,
        token: str | None,
    ) -> httpx.Headers:
        built = httpx.Headers(headers or {})
        if token:
            built["Authorization"] = f"Bearer {token}"
        built[TUNNEL_HEADER] = "true"

        if "Accept" not in built:
            built["Accept"] = JSON_MEDIA_TYPE
        if "Content-Type" not in built and method in MUTATING_METHODS:
            built["Content-Type"] = JSON_MEDIA_TYPE
        return built

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        json: Any = None,
        content: str | bytes | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request; authorization failures are returned, never raised.

        Transport errors (``httpx.TransportError``) propagate.
        """
        method = method.upper()
        url = self.resolve_url(path)
        token = await self.store.get(CredentialKind.ACCESS)
        send_kwargs: dict[str, Any] = {"json": json, "content": content, "params": params}

        client = await self._get_client()
        logger.debug("%s %s (authenticated=%s)", method, url, bool(token))
        response = await client.request(
            method, url, headers=self._build_headers(headers, method, token), **send_kwargs
        )

        if is_auth_failure(response) and token:
            response = await self._retry_with_fresh_token(
                method, url, headers, send_kwargs, response, token
            )
        return response

    async def _retry_with_fresh_token(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        send_kwargs: dict[str, Any],
        original: httpx.Response,
        sent_token: str,
    ) -> httpx.Response:
        # another caller may have rotated the pair since this request went out
        current = await self.store.get(CredentialKind.ACCESS)
        status = original.status_code
        if current and current != sent_token and not self.refresh_in_flight:
            logger.info("%s %s returned %d, retrying with rotated credentials", method, url, status)
            new_token: str | None = current
        else:
            logger.info("%s %s returned %d, refreshing credentials", method, url, status)
            new_token = await self.refresh_access_token()

        if not new_token:
            await self._end_session()
            return original

        client = await self._get_client()
        retry = await client.request(
            method, url, headers=self._build_headers(headers, method, new_token), **send_kwargs
        )

        if is_auth_failure(retry):
            logger.warning("Retry of %s %s still unauthorized (%d)", method, url, retry.status_code)
            await self._end_session()
        return retry

    async def refresh_access_token(self) -> str | None:
        """Exchange the refresh credential for a new pair.

        Concurrent callers share one refresh call and all receive its result:
        the new access token, or ``None`` when the session is over.
        """
        return await self._refresh_flight.run_exclusive(self._refresh)

    async def _refresh(self) -> str | None:
        try:
            refresh_token = await self.store.get(CredentialKind.REFRESH)
            if not refresh_token:
                logger.info("No refresh credential stored")
                await self.store.clear()
                return None

            client = await self._get_client()
            response = await client.post(
                self.resolve_url(REFRESH_PATH),
                json={"refreshToken": refresh_token},
                headers={"Content-Type": JSON_MEDIA_TYPE, TUNNEL_HEADER: "true"},
            )
            if not response.is_success:
                logger.warning("Credential refresh rejected with status %d", response.status_code)
                await self.store.clear()
                return None

            tokens = TokenPair.model_validate(response.json())
            await self.store.set_pair(tokens)
        except Exception:
            logger.exception("Error refreshing credentials")
            await self.store.clear()
            return None

        logger.info("Credentials refreshed")
        await self.event_bus.emit(EventType.CREDENTIALS_REFRESHED)
        return tokens.access_token

    async def _end_session(self) -> None:
        await self.store.clear()
        await self.event_bus.emit(EventType.CREDENTIALS_CLEARED)
        await self.navigator.redirect_to_login()

    # --- Session helpers ---

    async def sign_in(self, tokens: TokenPair) -> None:
        """Persist a pair obtained from a login response."""
        await self.store.set_pair(tokens)

    async def sign_out(self) -> None:
        await self.store.clear()
        await self.event_bus.emit(EventType.CREDENTIALS_CLEARED)

    async def is_authenticated(self) -> bool:
        return await self.store.get(CredentialKind.ACCESS) is not None
