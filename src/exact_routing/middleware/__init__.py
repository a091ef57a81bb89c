"""Ready-made middleware for exact-match routes."""

from exact_routing.middleware.auth import bearer_auth, jwt_middleware, verify_token
from exact_routing.middleware.logging import logging_middleware

__all__ = ["bearer_auth", "jwt_middleware", "logging_middleware", "verify_token"]
