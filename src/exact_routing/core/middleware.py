"""Middleware primitives for exact-match routing.

Provides the Handler and Middleware types and middleware chain assembly.
A middleware is a handler transformer: it receives the next handler and
returns a new handler that decides whether to call it.
"""

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from exact_routing.exceptions import MiddlewareValidationError

Handler = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Handler], Handler]


def normalize_middleware(
    middleware_attr: Any,
    *,
    source: str = "",
) -> tuple[Middleware, ...]:
    """Normalize a middleware argument to a tuple of callables.

    Accepts: None, single callable, list, or tuple.
    Returns: tuple of callables (empty if None).

    Args:
        middleware_attr: The middleware value to normalize.
        source: Context for error messages (e.g., "GET /users").

    Raises:
        MiddlewareValidationError: If middleware_attr is not a valid type
            or contains a non-callable value.
    """
    prefix = f"{source}: " if source else ""

    if middleware_attr is None:
        return ()
    if callable(middleware_attr) and not isinstance(middleware_attr, (list, tuple)):
        return (middleware_attr,)
    if not isinstance(middleware_attr, (list, tuple)):
        raise MiddlewareValidationError(
            f"{prefix}middleware must be a list or callable, "
            f"got {type(middleware_attr).__name__}"
        )

    for i, mw in enumerate(middleware_attr):
        if not callable(mw):
            raise MiddlewareValidationError(
                f"{prefix}middleware list contains non-callable at index {i}"
            )
    return tuple(middleware_attr)


def flatten_middleware(
    middlewares: tuple[Any, ...],
    *,
    source: str = "",
) -> tuple[Middleware, ...]:
    """Flatten variadic registration arguments into one ordered tuple.

    Each positional argument may itself be a callable, a list or a tuple,
    so ``get(path, h, auth, log)`` and ``get(path, h, [auth, log])`` are
    equivalent.
    """
    result: list[Middleware] = []
    for item in middlewares:
        result.extend(normalize_middleware(item, source=source))
    return tuple(result)


def ensure_async(handler: Callable[..., Any]) -> Handler:
    """Return an async version of a handler.

    Sync handlers run in Starlette's threadpool so they can't block the
    event loop. Async handlers are returned unchanged.
    """
    if inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    ):
        return handler

    @functools.wraps(handler)
    async def threaded(request: Request) -> Response:
        return await run_in_threadpool(handler, request)

    return threaded


def compose(
    handler: Handler,
    middlewares: tuple[Middleware, ...] | list[Middleware] = (),
) -> Handler:
    """Wrap a handler with a middleware chain.

    Applies middleware in reverse order so that the first middleware in
    the list is the outermost (executes first on the way in and last on
    the way out).

    Args:
        handler: The route handler function.
        middlewares: Ordered sequence of middleware (outermost first).

    Returns:
        The composed handler. If middlewares is empty, returns the
        handler unchanged.
    """
    if not middlewares:
        return handler

    # Build chain from inside out (last middleware wraps handler first)
    chain = handler
    for mw in reversed(middlewares):
        chain = mw(chain)
    return chain


def call_next_middleware(
    middleware: Callable[[Request, Handler], Awaitable[Response]],
) -> Middleware:
    """Adapt a Starlette-style ``(request, call_next)`` function.

    FastAPI and Starlette write function middleware as
    ``async def mw(request, call_next)``. This turns one into a handler
    transformer usable at registration.

    Example:
        async def add_header(request, call_next):
            response = await call_next(request)
            response.headers["X-Hello"] = "world"
            return response

        router.get("/", handler, call_next_middleware(add_header))
    """

    def transform(next_handler: Handler) -> Handler:
        async def wrapped(request: Request) -> Response:
            return await middleware(request, next_handler)

        # Preserve metadata for debugging
        wrapped.__name__ = (
            f"{middleware.__name__}_wrapping_{getattr(next_handler, '__name__', 'handler')}"
        )
        wrapped.__qualname__ = wrapped.__name__
        return wrapped

    transform.__name__ = getattr(middleware, "__name__", "middleware")
    transform.__qualname__ = transform.__name__
    return transform
