"""Exception handlers turning host failures into JSON error responses."""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from eventglue.exceptions import HostError
from eventglue.logging.config import get_logger
from eventglue.runtime.errors import HandlerFault

logger = get_logger(__name__)


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    correlation_id: str | None = None,
) -> JSONResponse:
    """
    Create standardized error response.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with error information
    """
    content = {
        "status": "error",
        "error_code": error_code,
        "message": message,
        "details": details or {},
    }

    if correlation_id:
        content["correlation_id"] = correlation_id

    return JSONResponse(status_code=status_code, content=content)


async def host_error_handler(request: Request, exc: HostError) -> JSONResponse:
    """Handle missing exports and other host errors."""
    correlation_id = getattr(request.state, "correlation_id", None)
    return create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=correlation_id,
    )


async def handler_fault_handler(request: Request, exc: HandlerFault) -> JSONResponse:
    """
    Handle an aborted fetch invocation.

    The fault message is logged but not returned; the client only learns
    that the handler threw.
    """
    correlation_id = getattr(request.state, "correlation_id", None)
    logger.error(
        f"Handler aborted: {exc.message}",
        extra={
            "correlation_id": correlation_id,
            "context": {"method": request.method, "path": request.url.path},
        },
    )
    return create_error_response(
        error_code="WORKER_EXCEPTION",
        message="Worker threw exception",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        correlation_id=correlation_id,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions raised inside the host."""
    correlation_id = getattr(request.state, "correlation_id", None)
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=exc,
        extra={
            "correlation_id": correlation_id,
            "context": {
                "exception_type": type(exc).__name__,
                "method": request.method,
                "path": request.url.path,
            },
        },
    )
    return create_error_response(
        error_code="INTERNAL_ERROR",
        message=f"{type(exc).__name__}: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        correlation_id=correlation_id,
    )
