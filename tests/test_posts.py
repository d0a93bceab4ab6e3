# tests/test_posts.py
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_post_defaults_to_configured_locale(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/posts",
        json={"title": "Hello World", "content": "First post", "read_time_minute": 3},
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    post = resp.json()
    assert post["locale"] == "en"
    assert post["slug"] == "hello-world"
    assert post["status"] == "draft"

    fetched = await client.get(f"/api/v1/posts/{post['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["content"] == "First post"


@pytest.mark.asyncio
async def test_same_slug_allowed_across_locales(client: AsyncClient, auth_headers: dict):
    en = await client.post("/api/v1/posts", json={"title": "Kyoto"}, headers=auth_headers)
    es = await client.post("/api/v1/posts", json={"title": "Kyoto", "locale": "es"}, headers=auth_headers)
    dup = await client.post("/api/v1/posts", json={"title": "Kyoto", "slug": "kyoto"}, headers=auth_headers)
    assert en.status_code == 201
    assert es.status_code == 201
    assert en.json()["slug"] == es.json()["slug"] == "kyoto"
    assert dup.status_code == 409

    spanish = await client.get("/api/v1/posts/slug/kyoto", params={"locale": "es"})
    assert spanish.json()["id"] == es.json()["id"]

    only_es = await client.get("/api/v1/posts", params={"locale": "es"})
    assert [p["id"] for p in only_es.json()["items"]] == [es.json()["id"]]


@pytest.mark.asyncio
async def test_published_listing_newest_first(client: AsyncClient, auth_headers: dict):
    ids = []
    for title in ("One", "Two", "Three"):
        created = (await client.post("/api/v1/posts", json={"title": title}, headers=auth_headers)).json()
        ids.append(created["id"])
    for post_id in ids[:2]:
        resp = await client.post(f"/api/v1/posts/{post_id}/publish", headers=auth_headers)
        assert resp.status_code == 200, resp.text

    published = await client.get("/api/v1/posts", params={"status": "published"})
    assert [p["id"] for p in published.json()["items"]] == [ids[1], ids[0]]

    await client.post(f"/api/v1/posts/{ids[1]}/unpublish", headers=auth_headers)
    published = await client.get("/api/v1/posts", params={"status": "published"})
    assert [p["id"] for p in published.json()["items"]] == [ids[0]]


@pytest.mark.asyncio
async def test_update_and_delete_post(client: AsyncClient, auth_headers: dict):
    post = (await client.post("/api/v1/posts", json={"title": "Draft"}, headers=auth_headers)).json()

    resp = await client.put(
        f"/api/v1/posts/{post['id']}",
        json={"title": "Final title", "excerpt": "Short"},
        headers=auth_headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["slug"] == "final-title"
    assert resp.json()["excerpt"] == "Short"

    deleted = await client.delete(f"/api/v1/posts/{post['id']}", headers=auth_headers)
    assert deleted.status_code == 204
    assert (await client.get(f"/api/v1/posts/{post['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_posts_by_category(client: AsyncClient, auth_headers: dict):
    category = (await client.post("/api/v1/categories", json={"name": "Tech"}, headers=auth_headers)).json()
    inside = await client.post(
        "/api/v1/posts", json={"title": "Inside", "category_id": category["id"]}, headers=auth_headers
    )
    await client.post("/api/v1/posts", json={"title": "Outside"}, headers=auth_headers)

    resp = await client.get("/api/v1/posts", params={"category_id": category["id"]})
    assert [p["id"] for p in resp.json()["items"]] == [inside.json()["id"]]
