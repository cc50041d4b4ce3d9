"""
Shared fixtures: a recording token store, a navigator mock and a Starlette
backend that mimics the app's auth and resource endpoints.
"""

from unittest.mock import Mock

import anyio
import httpx
import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from nailapi.client.auth import AuthCoordinator
from nailapi.client.executor import RequestExecutor
from nailapi.client.token_store import InMemoryTokenStore
from nailapi.shared.auth import TokenPair

BASE_URL = "https://api.example.com"


class RecordingTokenStore(InMemoryTokenStore):
    """In-memory store that counts save/clear calls."""

    def __init__(self, tokens: TokenPair | None = None):
        super().__init__(tokens)
        self.saved: list[tuple[str, str]] = []
        self.clear_calls = 0

    async def save(self, access_token: str, refresh_token: str) -> None:
        self.saved.append((access_token, refresh_token))
        await super().save(access_token, refresh_token)

    async def clear(self) -> None:
        self.clear_calls += 1
        await super().clear()


def success(data=None, message: str = "ok", code: int = 200) -> JSONResponse:
    return JSONResponse({"code": code, "message": message, "data": data})


def failure(message: str, code: int) -> JSONResponse:
    return JSONResponse({"code": code, "message": message}, status_code=code)


class MockBackend:
    """
    Resource endpoints accept only ``Bearer <valid_token>``. The reissue
    endpoint hands out ``new_token`` unless ``reissue_fails`` is set.
    """

    def __init__(self, valid_token: str = "tok2", new_token: str = "tok2", refresh_token: str = "refresh-1"):
        self.valid_token = valid_token
        self.new_token = new_token
        self.refresh_token = refresh_token
        self.reissue_fails = False
        self.reissue_calls = 0
        # set by tests to hold the reissue response until released
        self.reissue_gate: anyio.Event | None = None
        self.reissue_started = anyio.Event()
        self.logout_fails = False
        self.seen: list[tuple[str, str, str | None]] = []

    async def reissue(self, request: Request):
        self.reissue_calls += 1
        self.reissue_started.set()
        body = await request.json()
        if self.reissue_gate is not None:
            await self.reissue_gate.wait()
        if self.reissue_fails or body.get("refreshToken") != self.refresh_token:
            return failure("Invalid refresh token", 401)
        return success({"accessToken": self.new_token}, message="Token reissued")

    def _unauthorized(self, request: Request) -> JSONResponse | None:
        auth = request.headers.get("authorization")
        self.seen.append((request.method, request.url.path, auth))
        if auth != f"Bearer {self.valid_token}":
            return failure("Access token expired", 401)
        return None

    async def resource(self, request: Request):
        if (rejected := self._unauthorized(request)) is not None:
            return rejected
        payload = None
        if request.method in ("POST", "PUT", "PATCH"):
            if request.headers.get("content-type", "").startswith("application/json"):
                payload = await request.json()
            else:
                payload = (await request.body()).decode()
        data = {"path": request.url.path, "echo": payload}
        if request.query_params:
            data["query"] = dict(request.query_params)
        if request.url.path == "/users/me":
            data.update(id=1, nickname="mina", profileImage="https://cdn.example.com/mina.png")
        return success(data)

    async def onboarding_status(self, request: Request):
        if (rejected := self._unauthorized(request)) is not None:
            return rejected
        version = int(request.query_params["maxSupportedVersion"])
        return success({"nextOnboardingStep": "NAIL_SHAPE" if version >= 2 else None})

    async def kakao(self, request: Request):
        body = await request.json()
        if not body.get("kakaoAccessToken"):
            return failure("Kakao access token is required", 400)
        return success({"accessToken": self.valid_token, "refreshToken": self.refresh_token})

    async def apple(self, request: Request):
        body = await request.json()
        if not body.get("identityToken") or not body.get("authorizationCode") or "email" not in body.get("user", {}):
            return failure("Apple credentials are incomplete", 400)
        return success({"accessToken": self.valid_token, "refreshToken": self.refresh_token})

    async def logout(self, request: Request):
        if not request.headers.get("authorization"):
            return failure("Authorization required", 401)
        if self.logout_fails:
            return failure("Logout is unavailable", 503)
        return success(None, message="Logged out")

    def requests_to(self, path: str) -> list[tuple[str, str, str | None]]:
        return [entry for entry in self.seen if entry[1] == path]

    def app(self) -> Starlette:
        return Starlette(
            routes=[
                Route("/auth/reissue", self.reissue, methods=["POST"]),
                Route("/auth/kakao", self.kakao, methods=["POST"]),
                Route("/auth/apple", self.apple, methods=["POST"]),
                Route("/auth/logout", self.logout, methods=["POST"]),
                Route("/onboarding-status", self.onboarding_status, methods=["GET"]),
                Route("/{path:path}", self.resource, methods=["GET", "POST", "PUT", "PATCH", "DELETE"]),
            ]
        )


@pytest.fixture
async def backend():
    return MockBackend()


@pytest.fixture
async def http_client(backend):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=backend.app()), base_url=BASE_URL) as client:
        yield client


@pytest.fixture
def storage():
    return RecordingTokenStore(TokenPair(access_token="tok1", refresh_token="refresh-1"))


@pytest.fixture
def navigator():
    return Mock()


@pytest.fixture
def executor(http_client):
    return RequestExecutor(http_client, base_url=BASE_URL)


@pytest.fixture
def make_coordinator(navigator, executor):
    """Build a coordinator installed on ``executor`` over a fresh store holding ``tokens``."""

    async def factory(tokens: TokenPair, storage: RecordingTokenStore | None = None):
        storage = storage if storage is not None else RecordingTokenStore(tokens)
        coordinator = AuthCoordinator(storage=storage, navigator=navigator)
        coordinator.install(executor)
        await coordinator.initialize()
        return coordinator, storage

    return factory


@pytest.fixture
async def coordinator(storage, make_coordinator):
    coordinator, _ = await make_coordinator(storage._tokens, storage)
    return coordinator
