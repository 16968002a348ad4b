"""Pure ASGI middleware that enforces a CORS policy.

Per request:
- Denied: 403 with no CORS headers and no body; the wrapped app never runs.
  The reason is logged, never sent to the client.
- Preflight: 204 with exactly the synthesized headers; the wrapped app never runs.
- Simple: the wrapped app runs unchanged; CORS headers are merged into its
  http.response.start message.

Notes:
- Not a BaseHTTPMiddleware, so streaming responses are not buffered.
- Only "http" scopes are evaluated; "websocket" and "lifespan" pass through.
- Requests without an Origin header pass through untouched.
- Exceptions raised by the wrapped app propagate as-is.
"""

from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from corsguard.engine import Denied, Preflight, evaluate
from corsguard.headers import VARY, HeaderList
from corsguard.logging import clear_request_context, get_logger, set_request_context
from corsguard.policy import CorsPolicy, RequestView

logger = get_logger(__name__)


def merge_headers(message: Message, headers: HeaderList) -> None:
    """Merge CORS headers into an http.response.start message in place.

    Vary values the app has not already listed are appended. Other CORS
    headers replace a same-named header. Everything else is left alone.
    """
    message.setdefault("headers", [])
    response_headers = MutableHeaders(scope=message)
    for name, value in headers:
        if name == VARY:
            existing = {
                item.strip().lower()
                for item in response_headers.get("vary", "").split(",")
                if item.strip()
            }
            for vary in value.split(","):
                if vary.lower() not in existing:
                    response_headers.add_vary_header(vary)
                    existing.add(vary.lower())
        else:
            response_headers[name] = value


class CORSPolicyMiddleware:
    """Pure ASGI middleware applying a CorsPolicy to every HTTP request.

    Args:
        app: The ASGI application to wrap.
        policy: The immutable CORS policy, shared by all requests.
    """

    def __init__(self, app: ASGIApp, policy: CorsPolicy):
        self.app = app
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = RequestView.from_scope(scope)
        if request.origin is None:
            # No Origin header = not a CORS request. Pass through.
            await self.app(scope, receive, send)
            return

        set_request_context(scope.get("path"), request.method, request.origin)
        try:
            await self.dispatch(request, scope, receive, send)
        finally:
            clear_request_context()

    async def dispatch(
        self, request: RequestView, scope: Scope, receive: Receive, send: Send
    ) -> None:
        """Evaluate the request and deny, answer, or forward it."""
        decision = evaluate(self.policy, request)

        if isinstance(decision, Denied):
            logger.info(
                "cors_request_denied",
                reason=decision.reason.value,
                origin=request.origin,
                method=request.method,
                path=scope.get("path"),
            )
            response = Response(status_code=403)
            await response(scope, receive, send)
            return

        if isinstance(decision, Preflight):
            response = Response(status_code=204, headers=dict(decision.headers))
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                merge_headers(message, decision.headers)
            await send(message)

        await self.app(scope, receive, send_with_cors)
