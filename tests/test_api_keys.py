# tests/test_api_keys.py
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_api_key_grants_write_access(client: AsyncClient, auth_headers: dict):
    resp = await client.post("/api/v1/api-keys", json={"name": "Deploy hook"}, headers=auth_headers)
    assert resp.status_code == 201, resp.text
    created = resp.json()
    raw_key = created["key"]
    assert raw_key.startswith("bcms_")
    assert created["prefix"] == raw_key[:12]

    category = await client.post("/api/v1/categories", json={"name": "Via key"}, headers={"X-API-Key": raw_key})
    assert category.status_code == 201, category.text
    assert category.json()["created_by"] == f"apikey:{created['id']}"

    listing = await client.get("/api/v1/api-keys", headers=auth_headers)
    keys = listing.json()["items"]
    assert [k["id"] for k in keys] == [created["id"]]
    assert "key" not in keys[0] and "key_hash" not in keys[0]
    assert keys[0]["last_used_at"] is not None


@pytest.mark.asyncio
async def test_invalid_or_deleted_key_is_rejected(client: AsyncClient, auth_headers: dict):
    bad = await client.post("/api/v1/categories", json={"name": "Nope"}, headers={"X-API-Key": "bcms_wrong"})
    assert bad.status_code == 401

    created = (await client.post("/api/v1/api-keys", json={"name": "Temp"}, headers=auth_headers)).json()
    deleted = await client.delete(f"/api/v1/api-keys/{created['id']}", headers=auth_headers)
    assert deleted.status_code == 204

    revoked = await client.post(
        "/api/v1/categories", json={"name": "Nope"}, headers={"X-API-Key": created["key"]}
    )
    assert revoked.status_code == 401


@pytest.mark.asyncio
async def test_api_key_cannot_manage_keys(client: AsyncClient, auth_headers: dict):
    created = (await client.post("/api/v1/api-keys", json={"name": "CI"}, headers=auth_headers)).json()
    resp = await client.get("/api/v1/api-keys", headers={"X-API-Key": created["key"]})
    assert resp.status_code == 401
