import json
import logging

import pytest

from blogcms.core.logging import JsonFormatter, bind_request_id, reset_request_id


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"name": "blogcms.test", "levelno": logging.INFO, "levelname": "INFO", "msg": message})
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_bound_request_id_and_extra():
    token = bind_request_id("req-123")
    try:
        line = JsonFormatter().format(_record("Category created", category_id="c1"))
    finally:
        reset_request_id(token)

    entry = json.loads(line)
    assert entry["message"] == "Category created"
    assert entry["request_id"] == "req-123"
    assert entry["extra"] == {"category_id": "c1"}


def test_json_formatter_without_request_context():
    entry = json.loads(JsonFormatter().format(_record("startup")))
    assert "request_id" not in entry
    assert "extra" not in entry


@pytest.mark.asyncio
async def test_request_id_is_echoed_or_generated(client):
    resp = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"

    resp = await client.get("/health")
    assert len(resp.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
async def test_security_headers_and_no_store_on_authenticated_requests(client, auth_headers):
    public = await client.get("/api/v1/categories")
    assert public.headers["X-Content-Type-Options"] == "nosniff"
    assert "no-store" not in public.headers.get("Cache-Control", "")

    private = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert private.headers["Cache-Control"] == "no-store"



@pytest.mark.asyncio
async def test_payload_limit_rejects_large_bodies():
    import httpx
    from fastapi import FastAPI

    from blogcms.middleware import PayloadLimitMiddleware

    small = FastAPI()
    small.add_middleware(PayloadLimitMiddleware, max_bytes=64)

    @small.post("/echo")
    async def echo(payload: dict):
        return payload

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=small), base_url="http://test") as ac:
        ok = await ac.post("/echo", json={"name": "short"})
        too_big = await ac.post("/echo", json={"name": "x" * 200})

    assert ok.status_code == 200
    assert too_big.status_code == 413
