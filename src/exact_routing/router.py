"""Exact-match router.

Registers handlers per HTTP verb and dispatches each request to the
handler whose (method, path) key matches exactly. The router is an ASGI
application, so any ASGI server can host it directly or a FastAPI /
Starlette app can mount it.
"""

import logging
from collections.abc import Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import Receive, Scope, Send

from exact_routing.core.middleware import Handler, ensure_async, flatten_middleware
from exact_routing.core.table import RouteKey, RouteTable
from exact_routing.exceptions import UnsupportedScopeError

logger = logging.getLogger(__name__)


class Router:
    """Exact-match (method, path) router with per-route middleware.

    Example:
        from exact_routing import Router, jwt_middleware, logging_middleware

        async def hello(request):
            return PlainTextResponse("Hello, world!")

        router = Router()
        router.get("/hello", hello, logging_middleware, jwt_middleware)

        # uvicorn main:router
    """

    def __init__(self, *, table: RouteTable | None = None) -> None:
        self.table = table if table is not None else RouteTable()

    def register(
        self,
        method: str,
        path: str,
        handler: Callable[..., Any],
        *middlewares: Any,
    ) -> None:
        """Register a handler for an exact (method, path) pair.

        Middleware is composed immediately; the first middleware given is
        the outermost. Re-registering a key replaces the previous handler.
        Path syntax is not validated.

        Raises:
            MiddlewareValidationError: If a middleware argument isn't callable.
            RouterFrozenError: If serving has already started.
        """
        source = f"{method} {path}"
        stack = flatten_middleware(middlewares, source=source)
        key = self.table.register(method, path, ensure_async(handler), stack)

        logger.debug(
            "Registered route",
            extra={
                "route": str(key),
                "handler": getattr(handler, "__name__", repr(handler)),
                "middleware_count": len(stack),
            },
        )

    def get(self, path: str, handler: Callable[..., Any], *middlewares: Any) -> None:
        self.register("GET", path, handler, *middlewares)

    def post(self, path: str, handler: Callable[..., Any], *middlewares: Any) -> None:
        self.register("POST", path, handler, *middlewares)

    def put(self, path: str, handler: Callable[..., Any], *middlewares: Any) -> None:
        self.register("PUT", path, handler, *middlewares)

    def delete(self, path: str, handler: Callable[..., Any], *middlewares: Any) -> None:
        self.register("DELETE", path, handler, *middlewares)

    def patch(self, path: str, handler: Callable[..., Any], *middlewares: Any) -> None:
        self.register("PATCH", path, handler, *middlewares)

    def options(self, path: str, handler: Callable[..., Any], *middlewares: Any) -> None:
        self.register("OPTIONS", path, handler, *middlewares)

    @property
    def routes(self) -> list[RouteKey]:
        return self.table.keys()

    async def dispatch(self, request: Request) -> Response:
        """Run the handler registered for the request's exact key.

        A method mismatch is not distinguished from an unknown path:
        both answer 404.
        """
        handler: Handler | None = self.table.lookup(request.method, request.url.path)
        if handler is None:
            return await self.not_found(request)
        return await handler(request)

    async def not_found(self, request: Request) -> Response:
        logger.debug(
            "No route matched",
            extra={"method": request.method, "path": request.url.path},
        )
        return PlainTextResponse("Not Found", status_code=404)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            raise UnsupportedScopeError(f"Unsupported ASGI scope type: {scope['type']!r}")

        # Registration must be complete once requests are being served
        self.table.freeze()

        request = Request(scope, receive, send)
        response = await self.dispatch(request)
        await response(scope, receive, send)

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self.table.freeze()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
