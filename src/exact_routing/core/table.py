"""Route table for exact-match routing.

Maps (method, path) keys to fully composed handlers. Middleware is
composed once at registration time; the middleware list itself is not
kept.
"""

import logging
from collections.abc import Iterator
from types import MappingProxyType
from typing import NamedTuple

from exact_routing.core.middleware import Handler, Middleware, compose
from exact_routing.exceptions import RouterFrozenError

logger = logging.getLogger(__name__)


class RouteKey(NamedTuple):
    """An exact (method, path) pair.

    Both fields are compared as literal strings. No case folding and no
    trailing-slash normalization is applied, so ``("GET", "/users")`` and
    ``("GET", "/users/")`` are different keys.
    """

    method: str
    path: str

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


class RouteTable:
    """Mapping of RouteKey to composed handler.

    Entries are created by register() and never removed. Registering an
    existing key replaces the previous handler (last write wins).

    Once freeze() is called the table is read-only and further
    registration raises RouterFrozenError.
    """

    def __init__(self) -> None:
        self._routes: dict[RouteKey, Handler] = {}
        self._frozen = False

    def register(
        self,
        method: str,
        path: str,
        handler: Handler,
        middlewares: tuple[Middleware, ...] = (),
    ) -> RouteKey:
        """Insert or overwrite the entry for (method, path).

        Args:
            method: HTTP method, matched literally.
            path: URL path, matched literally.
            handler: Terminal async handler.
            middlewares: Ordered middleware, outermost first.

        Returns:
            The key the handler was stored under.

        Raises:
            RouterFrozenError: If the table has been frozen.
        """
        key = RouteKey(method, path)

        if self._frozen:
            raise RouterFrozenError(f"Cannot register {key}: route table is frozen")

        if key in self._routes:
            logger.debug("Replacing registered route", extra={"route": str(key)})

        self._routes[key] = compose(handler, middlewares)
        return key

    def lookup(self, method: str, path: str) -> Handler | None:
        """Return the composed handler for an exact key, or None."""
        return self._routes.get(RouteKey(method, path))

    def freeze(self) -> None:
        """Make the table read-only. Idempotent."""
        if self._frozen:
            return
        self._frozen = True
        self._routes = MappingProxyType(self._routes)  # type: ignore[assignment]
        logger.info("Route table frozen", extra={"route_count": len(self._routes)})

    @property
    def frozen(self) -> bool:
        return self._frozen

    def keys(self) -> list[RouteKey]:
        return list(self._routes)

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(list(self._routes))

    def __len__(self) -> int:
        return len(self._routes)
