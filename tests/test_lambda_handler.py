"""Tests for the AWS Lambda host."""

import sys
import textwrap
from pathlib import Path

import pytest

import eventglue.lambda_handler as lambda_module
from eventglue.config import settings
from eventglue.exceptions import ExportNotFoundError, HostError
from eventglue.host.loader import load_exports, load_handler_module
from eventglue.lambda_handler import (
    api_gateway_response,
    is_scheduled_event,
    lambda_handler,
    raw_request,
    raw_scheduled_event,
)

LAMBDA_WORKER_SOURCE = textwrap.dedent(
    """
    from eventglue import event, fetch, scheduled
    from eventglue.runtime import Response

    fired = []

    @event(fetch)
    async def handle(req, env, ctx):
        greeting = env.get("GREETING", "hello")
        return Response.ok(f"{greeting} {req.method} {req.path}")

    @event(scheduled)
    async def tick(event, env, ctx):
        fired.append((event.cron, event.scheduled_time))
    """
)

SCHEDULED_EVENT = {
    "version": "0",
    "id": "53dc4d37-cffa-4f76-80c9-8b7d4a4d2eaa",
    "detail-type": "Scheduled Event",
    "source": "aws.events",
    "time": "2026-01-01T00:00:00Z",
    "region": "us-east-1",
    "resources": ["arn:aws:events:us-east-1:123456789012:rule/every-minute"],
    "detail": {},
}

HTTP_API_EVENT = {
    "version": "2.0",
    "rawPath": "/items",
    "rawQueryString": "limit=5",
    "headers": {"Host": "api.example.com", "Content-Type": "application/json"},
    "requestContext": {"http": {"method": "POST", "path": "/items"}},
    "body": '{"id": 1}',
    "isBase64Encoded": False,
}

REST_API_EVENT = {
    "httpMethod": "GET",
    "path": "/status",
    "queryStringParameters": {"verbose": "1"},
    "headers": {"Host": "abc.execute-api.aws.com", "X-Forwarded-Proto": "http"},
    "body": None,
}


@pytest.fixture
def worker(tmp_path: Path):
    """Load a handler module and install its exports in the Lambda host."""
    path = tmp_path / "lambda_worker.py"
    path.write_text(LAMBDA_WORKER_SOURCE, encoding="utf-8")
    module = load_handler_module(path)
    lambda_module._exports = load_exports(module)
    yield module
    lambda_module._exports = None
    sys.modules.pop("lambda_worker", None)


class TestEventConversion:
    """Tests for converting Lambda events into raw host values."""

    def test_http_api_v2_request(self) -> None:
        raw = raw_request(HTTP_API_EVENT)

        assert raw["method"] == "POST"
        assert raw["url"] == "https://api.example.com/items?limit=5"
        assert raw["headers"]["content-type"] == "application/json"
        assert raw["body"] == '{"id": 1}'
        assert raw["isBase64Encoded"] is False

    def test_rest_api_v1_request(self) -> None:
        raw = raw_request(REST_API_EVENT)

        assert raw["method"] == "GET"
        assert raw["url"] == "http://abc.execute-api.aws.com/status?verbose=1"
        assert raw["body"] == ""

    def test_request_defaults(self) -> None:
        raw = raw_request({})

        assert raw["method"] == "GET"
        assert raw["url"] == "https://localhost/"

    def test_is_scheduled_event(self) -> None:
        assert is_scheduled_event(SCHEDULED_EVENT)
        assert not is_scheduled_event(HTTP_API_EVENT)

    def test_scheduled_event_uses_rule_arn(self) -> None:
        raw = raw_scheduled_event(SCHEDULED_EVENT)

        assert raw["cron"] == SCHEDULED_EVENT["resources"][0]
        assert raw["scheduledTime"] == 1767225600000.0
        assert raw["type"] == "scheduled"

    def test_scheduled_event_prefers_detail_cron(self) -> None:
        event = {**SCHEDULED_EVENT, "detail": {"cron": "*/5 * * * *"}}
        assert raw_scheduled_event(event)["cron"] == "*/5 * * * *"

    def test_api_gateway_response(self) -> None:
        result = api_gateway_response(
            {"status": 204, "headers": {}, "body": "", "isBase64Encoded": False}
        )
        assert result == {
            "statusCode": 204,
            "headers": {},
            "body": "",
            "isBase64Encoded": False,
        }


class TestLambdaHandler:
    """Tests for lambda_handler dispatch."""

    def test_dispatches_requests_to_fetch(self, worker, monkeypatch) -> None:
        monkeypatch.setenv("WORKER_VAR_GREETING", "hi")

        result = lambda_handler(HTTP_API_EVENT, None)

        assert result["statusCode"] == 200
        assert result["body"] == "hi POST /items"
        assert result["headers"]["content-type"].startswith("text/plain")

    def test_dispatches_schedules_to_scheduled(self, worker) -> None:
        result = lambda_handler(SCHEDULED_EVENT, None)

        assert result is None
        assert worker.fired == [
            (SCHEDULED_EVENT["resources"][0], 1767225600000.0)
        ]

    def test_missing_export(self, worker) -> None:
        lambda_module._exports = {"fetch": lambda_module._exports["fetch"]}

        with pytest.raises(ExportNotFoundError):
            lambda_handler(SCHEDULED_EVENT, None)

    def test_handler_module_unset(self, monkeypatch) -> None:
        monkeypatch.setattr(lambda_module, "_exports", None)
        monkeypatch.setattr(settings, "handler_module", None)

        with pytest.raises(HostError) as exc_info:
            lambda_handler(HTTP_API_EVENT, None)

        assert exc_info.value.error_code == "HANDLER_MODULE_UNSET"

    def test_loads_configured_module(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "configured_worker.py"
        path.write_text(LAMBDA_WORKER_SOURCE, encoding="utf-8")
        monkeypatch.setattr(lambda_module, "_exports", None)
        monkeypatch.setattr(settings, "handler_module", str(path))

        try:
            result = lambda_handler(REST_API_EVENT, None)
        finally:
            sys.modules.pop("configured_worker", None)

        assert result["body"] == "hello GET /status"
        assert sorted(lambda_module._exports) == ["fetch", "scheduled"]
