"""Exception hierarchy for exact-match routing errors."""


class ExactRoutingError(Exception):
    """Base exception for all exact-routing errors.

    This is the parent class for all exceptions raised by the
    exact-routing package. Catching this exception will catch all
    routing-related errors.

    Example:
        try:
            router.get("/late", handler)
        except ExactRoutingError as e:
            logger.error(f"Failed to register route: {e}")
    """


class MiddlewareValidationError(ExactRoutingError):
    """Raised when middleware passed at registration is invalid.

    This exception is raised when:
        - A middleware argument is neither a callable, a list nor a tuple
        - A middleware list contains a non-callable value

    Example:
        MiddlewareValidationError(
            "GET /users: middleware list contains non-callable at index 2"
        )
    """


class RouterFrozenError(ExactRoutingError):
    """Raised when a route is registered after the table was frozen.

    The route table is frozen once serving begins (on the first
    dispatched request or on ASGI lifespan startup). Registration must
    complete before that point.

    Example:
        RouterFrozenError("Cannot register POST /late: route table is frozen")
    """


class UnsupportedScopeError(ExactRoutingError):
    """Raised when the hosting server sends an ASGI scope the router can't serve.

    Only ``http`` and ``lifespan`` scopes are handled.

    Example:
        UnsupportedScopeError("Unsupported ASGI scope type: 'websocket'")
    """


class ConfigurationError(ExactRoutingError):
    """Raised when settings fail validation.

    Example:
        ConfigurationError("JWT algorithm 'RS256' is not in the HMAC family")
    """


class TokenVerificationError(ExactRoutingError):
    """Raised when a bearer token can't be verified.

    The authentication middleware catches this and answers 401, so the
    reason never reaches the client. It is only logged.

    Example:
        TokenVerificationError("Signing algorithm 'RS256' is not allowed")
    """
