# tests/test_categories.py
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_travel_category_lifecycle(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/categories",
        json={"name": "Travel", "slug": "travel"},
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["id"]
    assert created["status"] == "draft"
    assert created["created_at"] == created["updated_at"]
    assert created["published_at"] is None
    assert created["created_by"].startswith("user:")

    resp = await client.put(
        f"/api/v1/categories/{created['id']}",
        json={"description": "Trips around the world"},
        headers=auth_headers,
    )
    assert resp.status_code == 200, resp.text
    updated = resp.json()
    assert updated["description"] == "Trips around the world"
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_at"] >= created["updated_at"]
    assert updated["status"] == "draft"


@pytest.mark.asyncio
async def test_reads_are_public(client: AsyncClient, auth_headers: dict):
    await client.post("/api/v1/categories", json={"name": "Food"}, headers=auth_headers)

    listing = await client.get("/api/v1/categories")
    assert listing.status_code == 200
    body = listing.json()
    assert [c["slug"] for c in body["items"]] == ["food"]
    assert body["has_more"] is False

    by_slug = await client.get("/api/v1/categories/slug/food")
    assert by_slug.status_code == 200
    assert by_slug.json()["name"] == "Food"


@pytest.mark.asyncio
async def test_write_requires_credentials(client: AsyncClient):
    resp = await client.post("/api/v1/categories", json={"name": "Nope"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_duplicate_slug_conflicts(client: AsyncClient, auth_headers: dict):
    first = await client.post("/api/v1/categories", json={"name": "Camping"}, headers=auth_headers)
    assert first.status_code == 201
    second = await client.post(
        "/api/v1/categories", json={"name": "Outdoors", "slug": "camping"}, headers=auth_headers
    )
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_derived_slug_gets_numeric_suffix(client: AsyncClient, auth_headers: dict):
    slugs = []
    for _ in range(3):
        resp = await client.post("/api/v1/categories", json={"name": "Camping"}, headers=auth_headers)
        assert resp.status_code == 201
        slugs.append(resp.json()["slug"])
    assert slugs == ["camping", "camping-2", "camping-3"]


@pytest.mark.asyncio
async def test_status_filter_and_missing_category(client: AsyncClient, auth_headers: dict):
    await client.post("/api/v1/categories", json={"name": "Draft one"}, headers=auth_headers)
    await client.post(
        "/api/v1/categories", json={"name": "Live one", "status": "published"}, headers=auth_headers
    )

    published = await client.get("/api/v1/categories", params={"status": "published"})
    items = published.json()["items"]
    assert [c["slug"] for c in items] == ["live-one"]
    assert items[0]["published_at"] is not None

    missing = await client.get("/api/v1/categories/does-not-exist")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_category_in_use_is_rejected(client: AsyncClient, auth_headers: dict):
    category = (await client.post("/api/v1/categories", json={"name": "Busy"}, headers=auth_headers)).json()
    gallery = await client.post(
        "/api/v1/galleries",
        json={"title": "Inside", "category_id": category["id"]},
        headers=auth_headers,
    )
    assert gallery.status_code == 201

    blocked = await client.delete(f"/api/v1/categories/{category['id']}", headers=auth_headers)
    assert blocked.status_code == 409

    await client.delete(f"/api/v1/galleries/{gallery.json()['id']}", headers=auth_headers)
    deleted = await client.delete(f"/api/v1/categories/{category['id']}", headers=auth_headers)
    assert deleted.status_code == 204
    assert (await client.get(f"/api/v1/categories/{category['id']}")).status_code == 404
