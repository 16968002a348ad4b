"""Chainable construction of CORS policies.

Usage:
    from corsguard.builder import CorsBuilder
    from corsguard.policy import AnyOrigin

    policy = (
        CorsBuilder()
        .allow_origins(AnyOrigin(allow_null=False))
        .allow_methods(["GET", "POST"])
        .allow_headers(["Authorization", "Content-Type"])
        .max_age(600)
        .build()
    )

    app.add_middleware(CORSPolicyMiddleware, policy=policy)
    # or equivalently, for Starlette(middleware=[...]):
    middleware = CorsBuilder().allow_origins(["https://app.example"]).into_middleware()

Defaults are closed: no origins, methods or headers are allowed until
configured. Invalid input raises PolicyConfigError at build time, never
during request handling.
"""

import copy
from collections.abc import Iterable
from datetime import timedelta

from starlette.middleware import Middleware

from corsguard.errors import PolicyConfigError
from corsguard.middleware import CORSPolicyMiddleware
from corsguard.policy import AllowedOrigins, AnyOrigin, CorsPolicy, OriginList, is_http_token


def _tokens(field: str, values: Iterable[str]) -> set[str]:
    """Validate an iterable of HTTP tokens.

    Raises:
        PolicyConfigError: If a value is not a valid token.
    """
    if isinstance(values, str):
        raise PolicyConfigError(field, "expected an iterable of names, not a single string")

    tokens = set()
    for value in values:
        if not isinstance(value, str) or not is_http_token(value):
            raise PolicyConfigError(field, f"invalid HTTP token: {value!r}")
        tokens.add(value)
    return tokens


def _origin_list(values: Iterable[str]) -> OriginList:
    if isinstance(values, str):
        raise PolicyConfigError(
            "allowed_origins", "expected an iterable of origins, not a single string"
        )

    origins = set()
    for value in values:
        if not isinstance(value, str) or not value:
            raise PolicyConfigError("allowed_origins", f"invalid origin: {value!r}")
        if value == "*":
            raise PolicyConfigError("allowed_origins", "use AnyOrigin() instead of '*'")
        origins.add(value)
    return OriginList(frozenset(origins))


class CorsBuilder:
    """Builder for CorsPolicy.

    Every setter returns the builder itself, so calls can be chained.
    Use copy() to derive several policies from one base configuration.
    """

    def __init__(self):
        self._allowed_origins: AllowedOrigins = OriginList()
        self._allowed_methods: set[str] = set()
        self._allowed_headers: set[str] = set()
        self._exposed_headers: set[str] = set()
        self._allow_credentials = False
        self._prefer_wildcard = False
        self._max_age: timedelta | None = None

    def allow_origins(self, origins: AnyOrigin | OriginList | Iterable[str]) -> "CorsBuilder":
        """Set the allowed origins.

        Args:
            origins: AnyOrigin, an OriginList, or an iterable of origin strings.
        """
        if isinstance(origins, AnyOrigin):
            self._allowed_origins = origins
        elif isinstance(origins, OriginList):
            self._allowed_origins = _origin_list(origins.origins)
        else:
            self._allowed_origins = _origin_list(origins)
        return self

    def allow_methods(self, methods: Iterable[str]) -> "CorsBuilder":
        """Set the methods a preflight may request. Case-sensitive."""
        self._allowed_methods = _tokens("allowed_methods", methods)
        return self

    def allow_headers(self, headers: Iterable[str]) -> "CorsBuilder":
        """Set the headers a preflight may request. Case-insensitive."""
        self._allowed_headers = {h.lower() for h in _tokens("allowed_headers", headers)}
        return self

    def expose_headers(self, headers: Iterable[str]) -> "CorsBuilder":
        """Set the response headers exposed to simple requests."""
        self._exposed_headers = {h.lower() for h in _tokens("exposed_headers", headers)}
        return self

    def allow_credentials(self, allow: bool = True) -> "CorsBuilder":
        self._allow_credentials = allow
        return self

    def prefer_wildcard(self, prefer: bool = True) -> "CorsBuilder":
        """Send "*" as allow-origin when possible (credentials off)."""
        self._prefer_wildcard = prefer
        return self

    def max_age(self, max_age: timedelta | int) -> "CorsBuilder":
        """Set how long a preflight answer may be cached.

        Args:
            max_age: A timedelta, or a whole number of seconds.

        Raises:
            PolicyConfigError: If max_age is negative or of the wrong type.
        """
        if isinstance(max_age, bool) or not isinstance(max_age, (int, timedelta)):
            raise PolicyConfigError("max_age", f"expected timedelta or int, got {max_age!r}")
        if isinstance(max_age, int):
            max_age = timedelta(seconds=max_age)
        if max_age < timedelta(0):
            raise PolicyConfigError("max_age", "must be >= 0")
        self._max_age = max_age
        return self

    def copy(self) -> "CorsBuilder":
        """Return an independent builder with the same configuration."""
        return copy.deepcopy(self)

    def build(self) -> CorsPolicy:
        """Build the immutable policy."""
        return CorsPolicy(
            allowed_origins=self._allowed_origins,
            allowed_methods=frozenset(self._allowed_methods),
            allowed_headers=frozenset(self._allowed_headers),
            exposed_headers=frozenset(self._exposed_headers),
            allow_credentials=self._allow_credentials,
            prefer_wildcard=self._prefer_wildcard,
            max_age=self._max_age,
        )

    def into_middleware(self) -> Middleware:
        """Build the policy and wrap it in a Starlette Middleware entry."""
        return Middleware(CORSPolicyMiddleware, policy=self.build())
