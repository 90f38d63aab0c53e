"""AWS Lambda host for generated exports.

API Gateway events (REST v1 and HTTP v2 payloads) are dispatched to the
handler module's ``fetch`` export; EventBridge scheduled events go to its
``scheduled`` export. The module path is read from EVENTGLUE_HANDLER_MODULE.

The handler is stateless apart from the loaded module, which is cached for
the life of the execution environment.
"""

from datetime import datetime
from typing import Any
from urllib.parse import urlencode

from eventglue.config import settings
from eventglue.exceptions import ExportNotFoundError, HostError
from eventglue.host.loader import load_exports, load_handler_module
from eventglue.logging.config import configure_logging, get_logger
from eventglue.runtime.bindings import HostBinding
from eventglue.runtime.env import Env
from eventglue.runtime.raw import RawContext, RawRequest, RawResponse, RawScheduledEvent

logger = get_logger(__name__)

_exports: dict[str, HostBinding] | None = None


def _get_exports() -> dict[str, HostBinding]:
    global _exports
    if _exports is None:
        if not settings.handler_module:
            raise HostError(
                "EVENTGLUE_HANDLER_MODULE is not set",
                error_code="HANDLER_MODULE_UNSET",
            )
        configure_logging()
        _exports = load_exports(load_handler_module(settings.handler_module))
    return _exports


def is_scheduled_event(event: dict) -> bool:
    """Check for an EventBridge scheduled event."""
    return (
        event.get("source") == "aws.events"
        and event.get("detail-type") == "Scheduled Event"
    )


def raw_scheduled_event(event: dict) -> RawScheduledEvent:
    """
    Convert an EventBridge scheduled event.

    EventBridge does not carry the cron expression, so the rule ARN stands
    in for it unless the rule's input supplies ``detail.cron``.
    """
    detail = event.get("detail") or {}
    resources = event.get("resources") or []
    cron = detail.get("cron") or (resources[0] if resources else "")
    fired_at = datetime.fromisoformat(event["time"].replace("Z", "+00:00"))
    return {
        "cron": cron,
        "scheduledTime": fired_at.timestamp() * 1000,
        "type": "scheduled",
    }


def raw_request(event: dict) -> RawRequest:
    """Convert an API Gateway proxy event (v1 or v2) into a raw request."""
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    http = (event.get("requestContext") or {}).get("http") or {}

    method = http.get("method") or event.get("httpMethod") or "GET"
    path = event.get("rawPath") or event.get("path") or "/"
    query = event.get("rawQueryString")
    if query is None:
        query = urlencode(event.get("queryStringParameters") or {})

    host = headers.get("host", "localhost")
    scheme = headers.get("x-forwarded-proto", "https")
    url = f"{scheme}://{host}{path}"
    if query:
        url = f"{url}?{query}"

    return {
        "method": method,
        "url": url,
        "headers": headers,
        "body": event.get("body") or "",
        "isBase64Encoded": bool(event.get("isBase64Encoded", False)),
    }


def api_gateway_response(raw: RawResponse) -> dict[str, Any]:
    """Convert a raw response into the API Gateway proxy result shape."""
    return {
        "statusCode": raw["status"],
        "headers": raw.get("headers") or {},
        "body": raw["body"],
        "isBase64Encoded": raw.get("isBase64Encoded", False),
    }


def lambda_handler(event: dict, context: object) -> dict | None:
    """
    AWS Lambda function handler.

    Args:
        event: API Gateway proxy event or EventBridge scheduled event
        context: Lambda context object (unused; a RawContext is created
            per invocation)

    Returns:
        API Gateway response dict for requests, None for scheduled events

    Notes:
        - HandlerFault from a fetch export propagates and fails the
          invocation, which API Gateway reports as a 502
    """
    exports = _get_exports()
    env = Env.from_environ()

    if is_scheduled_event(event):
        binding = exports.get("scheduled")
        if binding is None:
            raise ExportNotFoundError("scheduled")
        binding(raw_scheduled_event(event), env, RawContext())
        return None

    binding = exports.get("fetch")
    if binding is None:
        raise ExportNotFoundError("fetch")
    return api_gateway_response(binding(raw_request(event), env, RawContext()))
