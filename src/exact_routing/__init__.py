"""Exact-match HTTP router with composable middleware."""

# Settings
from exact_routing.config import AuthSettings

# Core types, for advanced users and type checking
from exact_routing.core.middleware import (
    Handler,
    Middleware,
    call_next_middleware,
    compose,
)
from exact_routing.core.table import RouteKey, RouteTable

# Exceptions
from exact_routing.exceptions import (
    ConfigurationError,
    ExactRoutingError,
    MiddlewareValidationError,
    RouterFrozenError,
    TokenVerificationError,
    UnsupportedScopeError,
)

# Bundled middleware
from exact_routing.middleware import bearer_auth, jwt_middleware, logging_middleware
from exact_routing.router import Router

__all__ = [
    # Primary API
    "Router",
    "AuthSettings",
    # Middleware API
    "compose",
    "call_next_middleware",
    "bearer_auth",
    "jwt_middleware",
    "logging_middleware",
    # Core types
    "Handler",
    "Middleware",
    "RouteKey",
    "RouteTable",
    # Exceptions
    "ConfigurationError",
    "ExactRoutingError",
    "MiddlewareValidationError",
    "RouterFrozenError",
    "TokenVerificationError",
    "UnsupportedScopeError",
]

__version__ = "1.0.0"
