"""FastAPI development host for generated exports.

Every request is converted to the host's raw request shape and dispatched
to the ``fetch`` export. ``/__scheduled?cron=...`` fires the ``scheduled``
export once, as a timer would.
"""

import base64
import time
from collections.abc import Mapping
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from eventglue import __version__
from eventglue.exceptions import ExportNotFoundError, HostError
from eventglue.host.exception_handler import (
    create_error_response,
    generic_exception_handler,
    handler_fault_handler,
    host_error_handler,
)
from eventglue.host.loader import load_exports, load_handler_module
from eventglue.host.middleware import LoggingMiddleware
from eventglue.logging.config import get_logger
from eventglue.runtime.bindings import HostBinding
from eventglue.runtime.env import Env
from eventglue.runtime.errors import HandlerFault
from eventglue.runtime.raw import RawContext, RawRequest, RawResponse, RawScheduledEvent

logger = get_logger(__name__)

SCHEDULED_PATH = "/__scheduled"
DEFAULT_CRON = "* * * * *"
HTTP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def raw_request_from_starlette(request: Request) -> RawRequest:
    """Convert an incoming request to the host's raw request dict."""
    body = await request.body()
    try:
        text, encoded = body.decode("utf-8"), False
    except UnicodeDecodeError:
        text, encoded = base64.b64encode(body).decode("ascii"), True

    return {
        "method": request.method,
        "url": str(request.url),
        "headers": dict(request.headers),
        "body": text,
        "isBase64Encoded": encoded,
    }


def response_from_raw(raw: RawResponse) -> Response:
    """Convert a raw response dict returned by the fetch export."""
    if raw.get("isBase64Encoded"):
        content = base64.b64decode(raw["body"])
    else:
        content = raw["body"].encode("utf-8")
    return Response(
        content=content,
        status_code=raw["status"],
        headers=raw.get("headers") or {},
    )


def _export(exports: Mapping[str, HostBinding], name: str) -> HostBinding:
    try:
        return exports[name]
    except KeyError:
        raise ExportNotFoundError(name) from None


def create_app(
    exports: Mapping[str, HostBinding], env: Env | None = None
) -> FastAPI:
    """
    Build the development host for a set of exports.

    Args:
        exports: Bindings from load_exports()
        env: Bindings passed to every invocation (default: from environ)

    Returns:
        FastAPI application
    """
    env = env if env is not None else Env.from_environ()

    app = FastAPI(
        title="eventglue dev host",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(HandlerFault, handler_fault_handler)
    app.add_exception_handler(HostError, host_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.api_route(SCHEDULED_PATH, methods=["GET", "POST"])
    async def trigger_scheduled(request: Request, cron: str = DEFAULT_CRON) -> JSONResponse:
        """Fire the scheduled export once."""
        binding = _export(exports, "scheduled")
        event: RawScheduledEvent = {
            "cron": cron,
            "scheduledTime": time.time() * 1000,
            "type": "scheduled",
        }
        try:
            await binding.invoke(event, env, RawContext())
        except Exception as exc:
            logger.error(
                "Scheduled handler failed",
                exc_info=exc,
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "context": {"cron": cron},
                },
            )
            return create_error_response(
                error_code="SCHEDULED_FAILED",
                message=f"{type(exc).__name__}: {exc}",
                status_code=500,
                details={"cron": cron},
                correlation_id=getattr(request.state, "correlation_id", None),
            )
        return JSONResponse(status_code=200, content={"status": "ok", "cron": cron})

    @app.api_route("/{path:path}", methods=HTTP_METHODS)
    async def dispatch_fetch(request: Request, path: str) -> Response:
        """Dispatch any other request to the fetch export."""
        binding = _export(exports, "fetch")
        raw = await raw_request_from_starlette(request)
        raw_response = await binding.invoke(raw, env, RawContext())
        return response_from_raw(raw_response)

    return app


def create_app_from_path(path: str | Path, strict: bool | None = None) -> FastAPI:
    """Load a handler file and build the development host for it."""
    module = load_handler_module(path, strict=strict)
    return create_app(load_exports(module))
