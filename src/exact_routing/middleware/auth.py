"""Bearer token authentication middleware.

Verifies an ``Authorization: Bearer <token>`` header holding a JWT signed
with an HMAC algorithm. Every failure answers 401 with the body
"Unauthorized"; the cause is only logged at DEBUG.
"""

import logging
from collections.abc import Callable
from typing import Any

import jwt
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from exact_routing.config import HMAC_ALGORITHMS, AuthSettings, validate_algorithms
from exact_routing.core.middleware import Handler, Middleware
from exact_routing.exceptions import TokenVerificationError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

KeySource = str | bytes | Callable[[dict[str, Any]], str | bytes]


def _resolve_key(key: KeySource, header: dict[str, Any]) -> str | bytes:
    if not callable(key):
        return key

    try:
        resolved = key(header)
    except Exception as exc:
        raise TokenVerificationError(f"Key lookup failed: {exc!r}") from exc

    if not isinstance(resolved, (str, bytes)):
        raise TokenVerificationError(
            f"Key lookup returned {type(resolved).__name__}, expected str or bytes"
        )
    return resolved


def verify_token(
    token: str,
    key: KeySource,
    *,
    algorithms: tuple[str, ...] = HMAC_ALGORITHMS,
    verify_claims: bool = False,
) -> dict[str, Any]:
    """Verify a compact JWT and return its claims.

    The token's ``alg`` header must be one of ``algorithms`` before the
    signature is checked, so asymmetric or ``none`` tokens are refused
    without touching the key.

    Args:
        token: Compact serialized JWT.
        key: Shared secret, or a callable receiving the unverified token
            header and returning the secret.
        algorithms: Accepted HMAC algorithms.
        verify_claims: Also check exp, nbf and iat when present.

    Returns:
        The decoded claims.

    Raises:
        TokenVerificationError: If the token is malformed, uses a
            disallowed algorithm, has a bad signature, or the key
            lookup fails for it.
        ConfigurationError: If ``algorithms`` leaves the HMAC family.
    """
    validate_algorithms(algorithms)

    try:
        header = jwt.get_unverified_header(token)
    except jwt.PyJWTError as exc:
        raise TokenVerificationError(f"Malformed token: {exc}") from exc

    algorithm = header.get("alg")
    if algorithm not in algorithms:
        raise TokenVerificationError(f"Signing algorithm {algorithm!r} is not allowed")

    options = {
        "verify_signature": True,
        "verify_exp": verify_claims,
        "verify_nbf": verify_claims,
        "verify_iat": verify_claims,
        "verify_aud": False,
        "verify_iss": False,
        "verify_sub": False,
        "verify_jti": False,
    }
    resolved_key = _resolve_key(key, header)

    try:
        return jwt.decode(
            token,
            resolved_key,
            algorithms=[algorithm],
            options=options,
        )
    except jwt.PyJWTError as exc:
        raise TokenVerificationError(f"Invalid token: {exc}") from exc


def unauthorized() -> Response:
    return PlainTextResponse(
        "Unauthorized",
        status_code=401,
        headers={"WWW-Authenticate": "Bearer"},
    )


def bearer_auth(
    key: KeySource,
    *,
    algorithms: tuple[str, ...] = HMAC_ALGORITHMS,
    verify_claims: bool = False,
) -> Middleware:
    """Build a middleware that requires a valid HMAC-signed bearer token.

    On success the decoded claims are stored on ``request.state.claims``
    and the wrapped handler runs. Otherwise the chain stops with 401.

    Raises:
        ConfigurationError: If ``algorithms`` leaves the HMAC family.

    Example:
        router.get("/private", handler, bearer_auth(settings.secret))
    """
    validate_algorithms(algorithms)

    def transform(next_handler: Handler) -> Handler:
        async def authenticate(request: Request) -> Response:
            authorization = request.headers.get("authorization")
            if not authorization:
                logger.debug(
                    "Rejected request without Authorization header",
                    extra={"path": request.url.path},
                )
                return unauthorized()

            token = authorization.removeprefix(BEARER_PREFIX)
            try:
                claims = verify_token(
                    token,
                    key,
                    algorithms=algorithms,
                    verify_claims=verify_claims,
                )
            except TokenVerificationError as exc:
                logger.debug(
                    "Rejected bearer token",
                    extra={"path": request.url.path, "reason": str(exc)},
                )
                return unauthorized()

            request.state.claims = claims
            return await next_handler(request)

        return authenticate

    return transform


def jwt_middleware(next_handler: Handler) -> Handler:
    """Bearer token middleware configured from the environment.

    Reads AuthSettings.from_env() when the route is registered.
    """
    settings = AuthSettings.from_env()
    return bearer_auth(
        settings.secret,
        algorithms=settings.algorithms,
        verify_claims=settings.verify_claims,
    )(next_handler)
