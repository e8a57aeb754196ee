"""Pytest fixtures for rhclient tests"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest
import pytest_asyncio

from rhclient import RobinhoodClient

ACCOUNT_URL = "https://api.robinhood.com/accounts/5PY78241/"


@dataclass
class StubRoute:
    """Canned answer for one (method, path)"""

    status_code: int = 200
    json: Any = None
    content: bytes | None = None
    error: Exception | None = None


class StubApi:
    """Records requests and answers them from registered routes

    Unregistered routes answer 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], StubRoute] = {}

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status_code: int = 200,
        content: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        self._routes[(method.upper(), path)] = StubRoute(
            status_code=status_code, json=json, content=content, error=error
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if route.error is not None:
            raise route.error
        if route.content is not None:
            return httpx.Response(route.status_code, content=route.content)
        if route.json is None:
            return httpx.Response(route.status_code)
        return httpx.Response(route.status_code, json=route.json)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method.upper() and r.url.path == path
        ]

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def form_fields(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body"""
    return dict(parse_qsl(request.content.decode("utf-8")))


@pytest.fixture
def stub_api() -> StubApi:
    """Stub API with a working login and one account"""
    api = StubApi()
    api.add("POST", "/api-token-auth/", json={"token": "abc"})
    api.add("GET", "/accounts/", json={"results": [{"url": ACCOUNT_URL}]})
    return api


@pytest.fixture
def client(stub_api: StubApi) -> RobinhoodClient:
    """Client wired to the stub API, not logged in yet"""
    return RobinhoodClient("user", "pass", transport=stub_api.transport)


@pytest_asyncio.fixture
async def connected_client(client: RobinhoodClient):
    """Client that completed the login handshake"""
    await client.connect()
    yield client
    await client.disconnect()


@pytest.fixture
def recorder() -> Callable[..., Any]:
    """Callback that records every (error, metadata, body) it receives"""

    calls: list[tuple[Any, Any, Any]] = []

    def _callback(error: Any, metadata: Any, body: Any) -> None:
        calls.append((error, metadata, body))

    _callback.calls = calls  # type: ignore[attr-defined]
    return _callback


@pytest.fixture
def decode_form() -> Callable[[httpx.Request], dict[str, str]]:
    return form_fields


@pytest.fixture
def account_url() -> str:
    return ACCOUNT_URL
