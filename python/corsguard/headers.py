"""CORS response header synthesis.

build_headers() turns a policy plus the request origin into the exact header
set for a permitted request. It is pure: the same inputs always produce the
same headers in the same order.

Rules shared by both request kinds:
- Vary always lists Origin; preflight answers also list the two
  Access-Control-Request-* headers
- Access-Control-Allow-Origin is "*" only when the policy prefers the wildcard
  AND credentials are off; otherwise the request origin is echoed verbatim
- Access-Control-Allow-Credentials is "true" when credentials are on, and
  absent otherwise (never "false")

Simple requests add Access-Control-Expose-Headers (when configured).
Preflight requests add Allow-Methods, Allow-Headers and Max-Age.
"""

from collections.abc import Iterable
from enum import Enum

from corsguard.policy import CorsPolicy

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"

WILDCARD = "*"

SIMPLE_VARY = ("Origin",)
PREFLIGHT_VARY = ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers")

HeaderList = tuple[tuple[str, str], ...]


class RequestKind(str, Enum):
    """Kind of a permitted cross-origin request."""

    SIMPLE = "simple"
    PREFLIGHT = "preflight"


def join_values(values: Iterable[str]) -> str:
    """Join a set of header values into one comma-separated value.

    Values are de-duplicated and sorted so output is stable.
    """
    return ",".join(sorted(set(values)))


def build_headers(policy: CorsPolicy, kind: RequestKind, origin: str) -> HeaderList:
    """Build the CORS headers for a permitted request.

    Args:
        policy: The CORS policy the request was validated against.
        kind: Whether the request is simple or a preflight.
        origin: The request's Origin header value, verbatim.

    Returns:
        Ordered (name, value) pairs.
    """
    headers: list[tuple[str, str]] = []

    vary = PREFLIGHT_VARY if kind is RequestKind.PREFLIGHT else SIMPLE_VARY
    headers.append((VARY, ",".join(vary)))

    if policy.prefer_wildcard and not policy.allow_credentials:
        headers.append((ALLOW_ORIGIN, WILDCARD))
    else:
        headers.append((ALLOW_ORIGIN, origin))

    if policy.allow_credentials:
        headers.append((ALLOW_CREDENTIALS, "true"))

    if kind is RequestKind.SIMPLE:
        if policy.exposed_headers:
            headers.append((EXPOSE_HEADERS, join_values(policy.exposed_headers)))
        return tuple(headers)

    headers.append((ALLOW_METHODS, join_values(policy.allowed_methods)))
    if policy.allowed_headers:
        headers.append((ALLOW_HEADERS, join_values(policy.allowed_headers)))
    if policy.max_age is not None:
        headers.append((MAX_AGE, str(int(policy.max_age.total_seconds()))))

    return tuple(headers)
