"""Example FastAPI service protected by CORSPolicyMiddleware.

This module creates and configures a small FastAPI application.
It registers exception handlers, the CORS middleware, and routes.

Middleware Ordering:
- Middleware runs in reverse order of registration
- CORSPolicyMiddleware is added LAST so it runs FIRST (outermost user
  middleware), before any routing or other middleware
- Denied and preflight requests therefore never reach routing

Routes:
- GET /        HTML confirmation that the CORS check passed
- GET /health  Liveness probe
"""

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from corsguard.config import get_settings
from corsguard.logging import configure_logging, get_logger
from corsguard.middleware import CORSPolicyMiddleware
from corsguard.policy import CorsPolicy
from corsguard.responses import http_exception_handler, unhandled_exception_handler

logger = get_logger(__name__)


def create_app(policy: CorsPolicy | None = None) -> FastAPI:
    """Create and configure the example FastAPI application.

    Args:
        policy: CORS policy to enforce. Read from settings when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    if policy is None:
        policy = get_settings().to_policy()

    app = FastAPI(
        title="corsguard example",
        description="Example service guarded by a CORS policy",
        version="0.1.0",
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return "<h1>CORS check passed</h1>"

    @app.get("/health")
    async def health() -> dict:
        return {"data": {"status": "ok"}}

    app.add_middleware(CORSPolicyMiddleware, policy=policy)
    logger.info(
        "cors_middleware_enabled",
        origins=type(policy.allowed_origins).__name__,
        methods=sorted(policy.allowed_methods),
        credentials=policy.allow_credentials,
    )

    return app


def create_app_from_env() -> FastAPI:
    """Configure logging from settings and create the application."""
    settings = get_settings()
    configure_logging(json_format=settings.log_json)
    return create_app(settings.to_policy())
