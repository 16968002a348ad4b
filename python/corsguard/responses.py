"""Error envelope and exception handlers for the example service.

Errors use a consistent envelope:
    { "error": { "code": "E_...", "message": "..." } }

CORS denials never reach these handlers; the middleware answers them with a
bare 403 before routing.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from corsguard.errors import STATUS_TO_ERROR_CODE, ApiErrorCode
from corsguard.logging import get_logger

logger = get_logger(__name__)


def error_response(code: ApiErrorCode, message: str) -> dict[str, Any]:
    """Create an error response envelope.

    Args:
        code: The error code enum value.
        message: Human-readable error message.

    Returns:
        Dict with "error" key containing code and message.
    """
    return {"error": {"code": code.value, "message": message}}


async def http_exception_handler(request: Request, exc: Any) -> JSONResponse:
    """Handle HTTP exceptions (404, 405, ...) and return the error envelope."""
    code = STATUS_TO_ERROR_CODE.get(exc.status_code, ApiErrorCode.E_INTERNAL)
    message = str(exc.detail) if exc.detail else "An error occurred"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(code, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions and return 500 with E_INTERNAL.

    Logs the exception server-side but never leaks details to client.
    """
    logger.exception("unhandled_exception", path=request.url.path)

    return JSONResponse(
        status_code=500,
        content=error_response(ApiErrorCode.E_INTERNAL, "Internal server error"),
    )
