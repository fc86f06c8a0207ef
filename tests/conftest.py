"""Shared test fixtures for Ideaforge."""

from __future__ import annotations

import asyncio
import json
import time
import uuid
from pathlib import Path
from typing import Any

import httpx
import jwt
import pytest

from ideaforge.auth.navigation import LoginNavigator
from ideaforge.client import AuthenticatedClient
from ideaforge.config import Config
from ideaforge.events.bus import EventBus
from ideaforge.models.tokens import TokenPair
from ideaforge.services.ideas import IdeaService
from ideaforge.storage.memory import MemoryCredentialStore

BASE_URL = "https://ideas.example.test"
SECRET = "test-secret-key-do-not-use"


def create_token(user_id: str, kind: str, exp_minutes: int = 15) -> str:
    now = int(time.time())
    payload = {
        "sub": user_id,
        "typ": kind,
        "jti": uuid.uuid4().hex,
        "exp": now + (exp_minutes * 60),
    }
    return jwt.encode(payload, SECRET, algorithm="HS256")


def verify_token(token: str, kind: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    except jwt.InvalidTokenError:
        return None
    return payload if payload.get("typ") == kind else None


class FakeIdeaServer:
    """In-process stand-in for the idea API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.refresh_calls = 0
        self.unauthorized = 0
        self.refresh_status: int | None = None
        self.refresh_body: Any = None
        self.always_unauthorized = False
        self.history_payload: Any = {
            "content": [
                {"id": 1, "theme": "TECH", "content": "First", "createdAt": "2024-03-01T10:00:00Z"},
                {"id": 2, "theme": "health", "content": "Second", "createdAt": 1700000000},
            ],
            "totalElements": 2,
            "totalPages": 1,
            "size": 10,
            "number": 0,
        }
        self.history_delay: Any = 0.0
        self.history_status = 200
        self.history_calls = 0
        self.favorites: set[str] = set()
        self._refresh_gate: asyncio.Event | None = None

    def issue_pair(self, user_id: str = "ana", exp_minutes: int = 15) -> TokenPair:
        return TokenPair(
            access_token=create_token(user_id, "access", exp_minutes),
            refresh_token=create_token(user_id, "refresh", 60 * 24),
        )

    def hold_refresh(self) -> None:
        """Park refresh calls until release_refresh() is called."""
        self._refresh_gate = asyncio.Event()

    def release_refresh(self) -> None:
        if self._refresh_gate is not None:
            self._refresh_gate.set()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/auth/refresh":
            return await self._refresh(request)

        if not self._authorized(request):
            self.unauthorized += 1
            return httpx.Response(401, text="Unauthorized")

        return await self._route(request)

    def _authorized(self, request: httpx.Request) -> bool:
        if self.always_unauthorized:
            return False
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return False
        return verify_token(header.removeprefix("Bearer "), "access") is not None

    async def _refresh(self, request: httpx.Request) -> httpx.Response:
        self.refresh_calls += 1
        if self._refresh_gate is not None:
            await self._refresh_gate.wait()
        if self.refresh_status is not None:
            return httpx.Response(self.refresh_status, text="refresh rejected")
        if self.refresh_body is not None:
            return httpx.Response(200, json=self.refresh_body)

        body = json.loads(request.content or b"{}")
        claims = verify_token(body.get("refreshToken", ""), "refresh")
        if claims is None:
            return httpx.Response(401, text="Invalid refresh token")
        pair = self.issue_pair(claims["sub"])
        return httpx.Response(
            200, json={"accessToken": pair.access_token, "refreshToken": pair.refresh_token}
        )

    async def _route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        method = request.method

        if path == "/api/ideas/history" and method == "GET":
            self.history_calls += 1
            call = self.history_calls
            delay = self.history_delay(call) if callable(self.history_delay) else self.history_delay
            if delay:
                await asyncio.sleep(delay)
            if self.history_status >= 400 and self.history_status != 404:
                return httpx.Response(self.history_status, text="boom")
            if self.history_payload is None:
                return httpx.Response(404)
            payload = self.history_payload
            if callable(payload):
                payload = payload(request, call)
            return httpx.Response(200, json=payload)

        if path == "/api/ideas/generate" and method == "POST":
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "id": 99,
                    "theme": "marketing",
                    "content": f'"Idea for theme {body["theme"]}: {body["context"]}"',
                    "createdAt": "2024-05-01T12:00:00Z",
                    "executionTimeMs": 850,
                    "modelUsed": "mistral",
                },
            )

        if path == "/api/ideas/surprise-me" and method == "POST":
            return httpx.Response(200, json={"theme": "travel", "content": "Surprise!"})

        if path == "/api/ideas/favorites" and method == "GET":
            return httpx.Response(
                200, json=[{"id": i, "theme": "tech", "content": "fav"} for i in sorted(self.favorites)]
            )

        if path == "/api/ideas/my-ideas" and method == "GET":
            return httpx.Response(
                200,
                json={
                    "content": [{"id": "m1", "theme": "tech", "content": "Mine"}],
                    "totalElements": 11,
                    "totalPages": 2,
                    "size": 10,
                    "number": int(request.url.params.get("page", 0)),
                },
            )

        if path.startswith("/api/ideas/") and path.endswith("/favorite"):
            idea_id = path.split("/")[3]
            if method == "POST":
                self.favorites.add(idea_id)
                return httpx.Response(204)
            if method == "DELETE":
                if idea_id not in self.favorites:
                    return httpx.Response(404, text="Idea is not a favorite")
                self.favorites.discard(idea_id)
                return httpx.Response(204)

        return httpx.Response(404, text="Not found")


@pytest.fixture
def server() -> FakeIdeaServer:
    return FakeIdeaServer()


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def navigator(bus: EventBus) -> LoginNavigator:
    return LoginNavigator(bus, current_path="/history")


@pytest.fixture
async def client(
    server: FakeIdeaServer,
    store: MemoryCredentialStore,
    bus: EventBus,
    navigator: LoginNavigator,
) -> AuthenticatedClient:
    c = AuthenticatedClient(
        BASE_URL,
        store=store,
        event_bus=bus,
        navigator=navigator,
        transport=server.transport(),
    )
    yield c
    await c.aclose()


@pytest.fixture
async def signed_in(client: AuthenticatedClient, server: FakeIdeaServer) -> AuthenticatedClient:
    await client.sign_in(server.issue_pair())
    return client


@pytest.fixture
def service(client: AuthenticatedClient) -> IdeaService:
    return IdeaService(client)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(home_path=tmp_path)
