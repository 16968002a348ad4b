"""Immutable CORS policy and the request projection it is evaluated against.

Types:
- AnyOrigin / OriginList: the two variants of AllowedOrigins
- CorsPolicy: fully resolved configuration, shared read-only by every request
- RequestView: the parts of an inbound request the engine looks at

Comparison rules:
- Origins are compared byte-exact (case and scheme matter)
- The literal origin "null" is the opaque-origin sentinel
- Methods are compared case-sensitively, as transmitted
- Header names are stored lowercased and compared case-insensitively
"""

import re
from dataclasses import dataclass, field
from datetime import timedelta

from starlette.datastructures import Headers
from starlette.types import Scope

NULL_ORIGIN = "null"

ORIGIN_HEADER = "origin"
REQUEST_METHOD_HEADER = "access-control-request-method"
REQUEST_HEADERS_HEADER = "access-control-request-headers"

# RFC 9110 token: 1*tchar
HTTP_TOKEN_PATTERN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def is_http_token(value: str) -> bool:
    """Check if value is a valid HTTP token (method or header name)."""
    return HTTP_TOKEN_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True)
class AnyOrigin:
    """Every origin is allowed.

    Attributes:
        allow_null: Whether the opaque "null" origin is allowed as well
    """

    allow_null: bool = False

    def matches(self, origin: str) -> bool:
        if origin == NULL_ORIGIN:
            return self.allow_null
        return True


@dataclass(frozen=True)
class OriginList:
    """Only the listed origins are allowed.

    "null" matches only when listed explicitly.

    Attributes:
        origins: Allowed origins, compared byte-exact
    """

    origins: frozenset[str] = field(default_factory=frozenset)

    def matches(self, origin: str) -> bool:
        return origin in self.origins


AllowedOrigins = AnyOrigin | OriginList


@dataclass(frozen=True)
class CorsPolicy:
    """Fully resolved CORS configuration.

    Built once at startup (see corsguard.builder.CorsBuilder) and passed to
    every evaluation. Never mutated, so it needs no locking.

    Attributes:
        allowed_origins: Which request origins are permitted
        allowed_methods: Method tokens permitted in preflight requests
        allowed_headers: Lowercased header names permitted in preflight requests
        exposed_headers: Lowercased header names exposed to simple requests
        allow_credentials: Whether credentialed requests are allowed
        prefer_wildcard: Send "*" as allow-origin when credentials are off
        max_age: How long browsers may cache a preflight answer
    """

    allowed_origins: AllowedOrigins = field(default_factory=OriginList)
    allowed_methods: frozenset[str] = field(default_factory=frozenset)
    allowed_headers: frozenset[str] = field(default_factory=frozenset)
    exposed_headers: frozenset[str] = field(default_factory=frozenset)
    allow_credentials: bool = False
    prefer_wildcard: bool = False
    max_age: timedelta | None = None

    def allows_origin(self, origin: str) -> bool:
        return self.allowed_origins.matches(origin)

    def allows_method(self, method: str) -> bool:
        return method in self.allowed_methods

    def allows_header(self, name: str) -> bool:
        return name.lower() in self.allowed_headers


@dataclass(frozen=True)
class RequestView:
    """Read-only projection of an inbound request.

    Attributes:
        method: HTTP method as transmitted
        origin: Origin header value, None when absent
        request_method: Access-Control-Request-Method value, None when absent
        request_headers: Access-Control-Request-Headers value, None when absent
    """

    method: str
    origin: str | None = None
    request_method: str | None = None
    request_headers: str | None = None

    @classmethod
    def from_scope(cls, scope: Scope) -> "RequestView":
        """Build a view from an ASGI http scope.

        When a header is repeated, the first occurrence wins.
        """
        headers = Headers(scope=scope)
        return cls(
            method=scope["method"],
            origin=headers.get(ORIGIN_HEADER),
            request_method=headers.get(REQUEST_METHOD_HEADER),
            request_headers=headers.get(REQUEST_HEADERS_HEADER),
        )

    @property
    def is_preflight(self) -> bool:
        """OPTIONS carrying Access-Control-Request-Method."""
        return self.method == "OPTIONS" and self.request_method is not None
