"""Pytest configuration, a fake Google endpoint and middleware fixtures.

Async tests are marked with ``@pytest.mark.asyncio``. Some environments run
unit tests without ``pytest-asyncio`` installed, which would otherwise make
those tests fail at collection/runtime.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

import httpx
import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from auth_google.middleware import GoogleAuth

CALLBACK_URL = "https://app.test/auth/callback"
TOKEN_PATH = "/token"
USERINFO_PATH = "/oauth2/v2/userinfo"


def pytest_configure(config: pytest.Config) -> None:
    """Register local markers used in the suite."""
    config.addinivalue_line("markers", "asyncio: mark test as asyncio-compatible")


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run ``@pytest.mark.asyncio`` tests without external plugins.

    If pytest-asyncio (or another async plugin) is installed, this hook may be
    bypassed by that plugin depending on hook ordering. In plugin-less
    environments, this fallback executes coroutine tests on a fresh loop.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    kwargs: dict[str, Any] = {
        arg: pyfuncitem.funcargs[arg]
        for arg in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_func(**kwargs))
    finally:
        loop.close()
        asyncio.set_event_loop(asyncio.new_event_loop())
    return True


# ── Fake provider ────────────────────────────────────────────────


class FakeGoogle:
    """Answers token and userinfo calls; records every request it sees."""

    def __init__(self) -> None:
        self.token_status = 200
        self.token_body: Any = {
            "access_token": "ya29.test-access",
            "token_type": "Bearer",
            "expires_in": 3599,
            "refresh_token": "1//test-refresh",
            "id_token": "eyJhbGciOiJSUzI1NiJ9.test.sig",
            "scope": "openid email profile",
        }
        self.userinfo_status = 200
        self.userinfo_body: Any = {"id": "42"}
        self.raise_on: str | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_on == request.url.path:
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.path == TOKEN_PATH:
            if isinstance(self.token_body, (dict, list)):
                return httpx.Response(self.token_status, json=self.token_body)
            return httpx.Response(self.token_status, text=str(self.token_body))
        if request.url.path == USERINFO_PATH:
            return httpx.Response(self.userinfo_status, json=self.userinfo_body)
        return httpx.Response(404, json={"error": "not_found"})

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


class Downstream:
    """Records every invocation of the wrapped handler."""

    def __init__(self) -> None:
        self.calls: list[tuple[Request, tuple[Any, ...], dict[str, Any]]] = []

    async def __call__(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        self.calls.append((request, args, kwargs))
        return PlainTextResponse("downstream")

    @property
    def last_outcome(self) -> Any:
        return self.calls[-1][2]["outcome"]


def make_request(path: str, query: str = "", method: str = "GET", raw_path: bytes | None = None) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "scheme": "https",
        "server": ("app.test", 443),
        "root_path": "",
        "path": path,
        "raw_path": raw_path if raw_path is not None else path.encode(),
        "query_string": query.encode(),
        "headers": [(b"host", b"app.test")],
    }
    return Request(scope)


@pytest.fixture()
def google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture()
def http_client(google: FakeGoogle) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(google.handler))


@pytest.fixture()
def auth(http_client: httpx.AsyncClient) -> GoogleAuth:
    return GoogleAuth(
        client_id="A",
        client_secret="B",
        callback_url=CALLBACK_URL,
        path="/login",
        http_client=http_client,
    )


@pytest.fixture()
def downstream() -> Downstream:
    return Downstream()
