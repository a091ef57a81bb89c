"""Settings for the bearer token middleware.

AuthSettings is a frozen dataclass. Build it in code or from the
environment with AuthSettings.from_env().

Environment variables:
    EXACT_ROUTING_JWT_SECRET         Shared HMAC secret
    EXACT_ROUTING_JWT_ALGORITHMS     Comma separated, e.g. "HS256,HS512"
    EXACT_ROUTING_JWT_VERIFY_CLAIMS  "1", "true", "yes" or "on" to check exp/nbf/iat
"""

import os
from dataclasses import dataclass

from exact_routing.exceptions import ConfigurationError

# Symmetric-key algorithms accepted for bearer tokens
HMAC_ALGORITHMS: tuple[str, ...] = ("HS256", "HS384", "HS512")

# Demonstration secret used when nothing is configured
DEFAULT_SECRET = "mi-clave-secreta"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class AuthSettings:
    """Configuration for bearer token verification.

    Attributes:
        secret: Shared HMAC secret used to verify signatures.
        algorithms: Accepted signing algorithms, all from the HMAC family.
        verify_claims: Whether to check exp/nbf/iat when present.
    """

    secret: str = DEFAULT_SECRET
    algorithms: tuple[str, ...] = HMAC_ALGORITHMS
    verify_claims: bool = False

    @classmethod
    def from_env(cls) -> "AuthSettings":
        """Create settings from EXACT_ROUTING_* environment variables."""
        raw_algorithms = os.getenv("EXACT_ROUTING_JWT_ALGORITHMS", "")
        algorithms = tuple(a.strip() for a in raw_algorithms.split(",") if a.strip())

        settings = cls(
            secret=os.getenv("EXACT_ROUTING_JWT_SECRET", DEFAULT_SECRET),
            algorithms=algorithms or HMAC_ALGORITHMS,
            verify_claims=os.getenv("EXACT_ROUTING_JWT_VERIFY_CLAIMS", "").lower() in _TRUTHY,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Fail fast on an empty secret or a non-HMAC algorithm.

        Raises:
            ConfigurationError: If any value is invalid.
        """
        if not self.secret:
            raise ConfigurationError("JWT secret must not be empty")
        validate_algorithms(self.algorithms)


def validate_algorithms(algorithms: tuple[str, ...]) -> None:
    """Require a non-empty set of HMAC-family algorithms.

    Raises:
        ConfigurationError: If ``algorithms`` is empty or names anything
            outside HMAC_ALGORITHMS.
    """
    if not algorithms:
        raise ConfigurationError("At least one JWT algorithm is required")
    for algorithm in algorithms:
        if algorithm not in HMAC_ALGORITHMS:
            raise ConfigurationError(
                f"JWT algorithm {algorithm!r} is not in the HMAC family "
                f"({', '.join(HMAC_ALGORITHMS)})"
            )
