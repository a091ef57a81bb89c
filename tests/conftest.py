"""Shared pytest fixtures for exact-routing tests."""

import base64
import json
from collections.abc import Callable
from typing import Any

import jwt
import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from exact_routing import Router

TEST_SECRET = "test-secret-with-enough-bytes-for-hs512-signing-0123456789abcdef"


@pytest.fixture
def router() -> Router:
    """A fresh, empty router."""
    return Router()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a Starlette Request from an HTTP scope without a server.

    Returns a callable that accepts:
    - method: HTTP method (default "GET")
    - path: URL path (default "/")
    - headers: Optional dict of request headers
    - client: (host, port) of the caller, or None
    """

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        client: tuple[str, int] | None = ("203.0.113.7", 51234),
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "server": ("testserver", 80),
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": b"",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "client": client,
        }
        return Request(scope)

    return _make


@pytest.fixture
def make_handler() -> Callable[..., Any]:
    """Build an async handler that records calls into a shared list.

    Returns a callable that accepts:
    - body: Plain-text response body
    - calls: Optional list the handler appends ``body`` to when invoked
    """

    def _make(body: str, calls: list[str] | None = None) -> Any:
        async def handler(request: Request) -> Response:
            if calls is not None:
                calls.append(body)
            return PlainTextResponse(body)

        handler.__name__ = f"handler_{body}"
        return handler

    return _make


@pytest.fixture
def secret() -> str:
    """The shared HMAC secret routes under test are configured with."""
    return TEST_SECRET


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Sign claims into a compact JWT.

    Returns a callable that accepts:
    - claims: Payload (defaults to {"sub": "user-1"})
    - secret: Signing key (defaults to the shared test secret)
    - algorithm: JWS algorithm (default "HS256")
    """

    def _make(
        claims: dict[str, Any] | None = None,
        *,
        secret: Any = TEST_SECRET,
        algorithm: str = "HS256",
    ) -> str:
        return jwt.encode(claims or {"sub": "user-1"}, secret, algorithm=algorithm)

    return _make


@pytest.fixture
def make_forged_token() -> Callable[..., str]:
    """Assemble a compact JWT with an arbitrary header and a junk signature."""

    def _segment(data: dict[str, Any]) -> str:
        raw = json.dumps(data, separators=(",", ":")).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    def _make(header: dict[str, Any], claims: dict[str, Any] | None = None) -> str:
        return f"{_segment(header)}.{_segment(claims or {'sub': 'user-1'})}.c2lnbmF0dXJl"

    return _make
