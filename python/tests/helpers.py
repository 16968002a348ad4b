"""Test helpers for building requests and inspecting decisions.

Provides:
- RequestView builders for simple and preflight requests
- Raw ASGI scope construction
- Header lookup and comma-separated set parsing
"""

from corsguard.engine import Decision, Preflight, Simple
from corsguard.headers import HeaderList
from corsguard.policy import RequestView

TEST_ORIGIN = "http://test.example"


def simple_request(origin: str | None = TEST_ORIGIN, method: str = "GET") -> RequestView:
    """Build a non-preflight request view."""
    return RequestView(method=method, origin=origin)


def preflight_request(
    origin: str | None = TEST_ORIGIN,
    request_method: str = "POST",
    request_headers: str | None = None,
) -> RequestView:
    """Build an OPTIONS preflight request view."""
    return RequestView(
        method="OPTIONS",
        origin=origin,
        request_method=request_method,
        request_headers=request_headers,
    )


def http_scope(
    method: str = "GET",
    path: str = "/",
    headers: dict[str, str] | None = None,
) -> dict:
    """Build a minimal ASGI http scope."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    return {
        "type": "http",
        "method": method,
        "path": path,
        "headers": raw_headers,
        "query_string": b"",
    }


def header(headers: HeaderList, name: str) -> str | None:
    """Look up a header value by case-insensitive name."""
    for key, value in headers:
        if key.lower() == name.lower():
            return value
    return None


def value_set(value: str | None) -> set[str]:
    """Parse a comma-separated header value into a lowercased set."""
    assert value is not None, "header missing"
    return {item.strip().lower() for item in value.split(",") if item.strip()}


def simple_headers(decision: Decision) -> HeaderList:
    """Return the headers of a Simple decision, failing otherwise."""
    assert isinstance(decision, Simple), f"expected Simple, was {decision!r}"
    return decision.headers


def preflight_headers(decision: Decision) -> HeaderList:
    """Return the headers of a Preflight decision, failing otherwise."""
    assert isinstance(decision, Preflight), f"expected Preflight, was {decision!r}"
    return decision.headers
