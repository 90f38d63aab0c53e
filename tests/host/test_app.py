"""Tests for the FastAPI development host."""

import base64
import uuid

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from eventglue.host.app import create_app, create_app_from_path, response_from_raw
from eventglue.host.loader import load_exports, load_handler_module
from eventglue.runtime import Env

from handler_sources import FAULTING_SOURCE, WORKER_SOURCE


@pytest.fixture
def worker(write_module):
    """Load the shared worker module."""
    return load_handler_module(write_module("dev_worker", WORKER_SOURCE))


@pytest.fixture
def app(worker) -> FastAPI:
    """Create a dev host for the worker."""
    return create_app(load_exports(worker), Env({"STAGE": "test"}))


@pytest.mark.asyncio
async def test_fetch_dispatch(app: FastAPI) -> None:
    """Test that requests reach the fetch export and its response returns."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/anything?name=glue")

    assert response.status_code == 200
    assert response.text == "hello glue"
    assert response.headers["x-handler"] == "main"
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_fetch_post_body(app: FastAPI) -> None:
    """Test that request bodies are passed through."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/items", json={"id": 1})

    assert response.status_code == 201
    assert response.json() == {"echo": {"id": 1}}


@pytest.mark.asyncio
async def test_respond_with_errors_returns_500(app: FastAPI) -> None:
    """Test the respond_with_errors policy through the host."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.text == "boom"


@pytest.mark.asyncio
async def test_handler_fault_becomes_error_response(write_module) -> None:
    """Test that an aborted invocation is reported without its message."""
    module = load_handler_module(write_module("faulting_worker", FAULTING_SOURCE))
    app = create_app(load_exports(module), Env())

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/")

    assert response.status_code == 500
    data = response.json()
    assert data["error_code"] == "WORKER_EXCEPTION"
    assert "boom" not in data["message"]
    assert "correlation_id" in data


@pytest.mark.asyncio
async def test_scheduled_trigger(app: FastAPI, worker) -> None:
    """Test that /__scheduled fires the scheduled export."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/__scheduled", params={"cron": "*/5 * * * *"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "cron": "*/5 * * * *"}
    assert worker.ticks == ["*/5 * * * *"]


@pytest.mark.asyncio
async def test_scheduled_failure(app: FastAPI) -> None:
    """Test that a failing scheduled handler yields a 500 error body."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/__scheduled?cron=fail")

    assert response.status_code == 500
    data = response.json()
    assert data["error_code"] == "SCHEDULED_FAILED"
    assert "tick failed" in data["message"]


@pytest.mark.asyncio
async def test_missing_export_is_404(write_module) -> None:
    """Test that hosting a fetch-only module has no scheduled trigger."""
    module = load_handler_module(write_module("fetch_only", FAULTING_SOURCE))
    app = create_app(load_exports(module), Env())

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/__scheduled")

    assert response.status_code == 404
    assert response.json()["error_code"] == "EXPORT_NOT_FOUND"


@pytest.mark.asyncio
async def test_correlation_id_header(app: FastAPI) -> None:
    """Test that responses carry a correlation ID."""
    correlation_id = str(uuid.uuid4())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        generated = await client.get("/")
        echoed = await client.get("/", headers={"X-Request-ID": correlation_id})

    uuid.UUID(generated.headers["x-request-id"])
    assert echoed.headers["x-request-id"] == correlation_id


def test_create_app_from_path(write_module) -> None:
    """Test building the host straight from a file."""
    app = create_app_from_path(write_module("path_worker", WORKER_SOURCE))
    assert isinstance(app, FastAPI)


def test_response_from_raw_base64() -> None:
    """Test decoding of base64 raw bodies."""
    response = response_from_raw(
        {
            "status": 200,
            "headers": {},
            "body": base64.b64encode(b"\x00\x01").decode("ascii"),
            "isBase64Encoded": True,
        }
    )
    assert response.body == b"\x00\x01"
