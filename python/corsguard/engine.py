"""CORS decision engine.

evaluate() classifies a request and checks it against a policy:
1. No Origin header: not a CORS request, Simple with no headers
2. OPTIONS + Access-Control-Request-Method: preflight, otherwise simple
3. Origin must be allowed (DISALLOWED_ORIGIN)
4. Preflight only: requested method must be allowed, case-sensitive
   (DISALLOWED_METHOD)
5. Preflight only: every requested header must be allowed, case-insensitive
   (DISALLOWED_HEADER)
6. Permitted requests get their headers from corsguard.headers

The engine never raises on request content, performs no I/O and keeps no
state between calls.
"""

from dataclasses import dataclass

from corsguard.errors import DenialReason
from corsguard.headers import HeaderList, RequestKind, build_headers
from corsguard.policy import CorsPolicy, RequestView, is_http_token


@dataclass(frozen=True)
class Simple:
    """Permitted non-preflight request; headers go on the downstream response."""

    headers: HeaderList = ()


@dataclass(frozen=True)
class Preflight:
    """Permitted preflight; answered immediately with these headers."""

    headers: HeaderList


@dataclass(frozen=True)
class Denied:
    """Request refused by policy."""

    reason: DenialReason


Decision = Simple | Preflight | Denied


def parse_header_list(value: str | None) -> list[str] | None:
    """Split an Access-Control-Request-Headers value into header names.

    Args:
        value: The raw header value, or None when absent.

    Returns:
        Trimmed header names (empty list when nothing is requested),
        or None if any entry is not a valid header name.
    """
    if value is None or not value.strip():
        return []

    names = [token.strip() for token in value.split(",")]
    if not all(is_http_token(name) for name in names):
        return None
    return names


def check_preflight(policy: CorsPolicy, request: RequestView) -> DenialReason | None:
    """Validate the method and headers a preflight asks for.

    Returns:
        The denial reason, or None when both are allowed.
    """
    if request.request_method is None or not policy.allows_method(request.request_method):
        return DenialReason.DISALLOWED_METHOD

    names = parse_header_list(request.request_headers)
    if names is None:
        return DenialReason.DISALLOWED_HEADER
    if not all(policy.allows_header(name) for name in names):
        return DenialReason.DISALLOWED_HEADER

    return None


def evaluate(policy: CorsPolicy, request: RequestView) -> Decision:
    """Decide whether a request is permitted and with which CORS headers.

    Args:
        policy: The CORS policy to apply.
        request: The request projection to check.

    Returns:
        Simple, Preflight or Denied.
    """
    origin = request.origin
    if origin is None:
        return Simple()

    if not policy.allows_origin(origin):
        return Denied(DenialReason.DISALLOWED_ORIGIN)

    if request.is_preflight:
        reason = check_preflight(policy, request)
        if reason is not None:
            return Denied(reason)
        return Preflight(build_headers(policy, RequestKind.PREFLIGHT, origin))

    return Simple(build_headers(policy, RequestKind.SIMPLE, origin))
