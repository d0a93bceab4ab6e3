# tests/test_galleries.py
import pytest
from httpx import AsyncClient


async def _category(client: AsyncClient, headers: dict, name: str) -> str:
    resp = await client.post("/api/v1/categories", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.mark.asyncio
async def test_japan_gallery_listed_by_category_in_creation_order(client: AsyncClient, auth_headers: dict):
    cat_1 = await _category(client, auth_headers, "Travel")
    cat_2 = await _category(client, auth_headers, "Food")

    earlier = await client.post(
        "/api/v1/galleries", json={"title": "Iceland 2022", "category_id": cat_1}, headers=auth_headers
    )
    await client.post("/api/v1/galleries", json={"title": "Ramen", "category_id": cat_2}, headers=auth_headers)
    japan = await client.post(
        "/api/v1/galleries", json={"title": "Japan 2023", "category_id": cat_1}, headers=auth_headers
    )
    assert japan.status_code == 201, japan.text
    assert japan.json()["slug"] == "japan-2023"
    assert japan.json()["status"] == "draft"

    resp = await client.get("/api/v1/galleries", params={"category_id": cat_1})
    assert resp.status_code == 200
    ids = [g["id"] for g in resp.json()["items"]]
    assert ids == [earlier.json()["id"], japan.json()["id"]]


@pytest.mark.asyncio
async def test_gallery_category_must_exist(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/galleries", json={"title": "Orphan", "category_id": "cat_missing"}, headers=auth_headers
    )
    assert resp.status_code == 422
    assert resp.json()["field"] == "category_id"


@pytest.mark.asyncio
async def test_duplicate_image_ids_rejected(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/galleries", json={"title": "Dupes", "image_ids": ["m1", "m1"]}, headers=auth_headers
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_changing_category_moves_gallery(client: AsyncClient, auth_headers: dict):
    cat_1 = await _category(client, auth_headers, "Travel")
    cat_2 = await _category(client, auth_headers, "Food")
    gallery = (
        await client.post("/api/v1/galleries", json={"title": "Kyoto", "category_id": cat_1}, headers=auth_headers)
    ).json()

    resp = await client.put(f"/api/v1/galleries/{gallery['id']}", json={"category_id": cat_2}, headers=auth_headers)
    assert resp.status_code == 200, resp.text

    in_old = (await client.get("/api/v1/galleries", params={"category_id": cat_1})).json()["items"]
    in_new = (await client.get("/api/v1/galleries", params={"category_id": cat_2})).json()["items"]
    assert in_old == []
    assert [g["id"] for g in in_new] == [gallery["id"]]


@pytest.mark.asyncio
async def test_publish_and_unpublish(client: AsyncClient, auth_headers: dict):
    gallery = (await client.post("/api/v1/galleries", json={"title": "Alps"}, headers=auth_headers)).json()
    assert gallery["published_at"] is None

    published = await client.post(f"/api/v1/galleries/{gallery['id']}/publish", headers=auth_headers)
    assert published.status_code == 200
    assert published.json()["status"] == "published"
    assert published.json()["published_at"] is not None

    drafts = await client.get("/api/v1/galleries", params={"status": "draft"})
    assert drafts.json()["items"] == []

    unpublished = await client.post(f"/api/v1/galleries/{gallery['id']}/unpublish", headers=auth_headers)
    assert unpublished.json()["status"] == "draft"
    assert unpublished.json()["published_at"] is None

    by_slug = await client.get("/api/v1/galleries/slug/alps")
    assert by_slug.json()["id"] == gallery["id"]


@pytest.mark.asyncio
async def test_galleries_with_same_title_coexist(client: AsyncClient, auth_headers: dict):
    first = await client.post("/api/v1/galleries", json={"title": "Japan 2023"}, headers=auth_headers)
    second = await client.post("/api/v1/galleries", json={"title": "Japan 2023"}, headers=auth_headers)
    assert first.status_code == 201
    assert second.status_code == 201, second.text
    assert second.json()["slug"] == "japan-2023-2"

    explicit = await client.post(
        "/api/v1/galleries", json={"title": "Tokyo", "slug": "japan-2023"}, headers=auth_headers
    )
    assert explicit.status_code == 409

    renamed = await client.put(
        f"/api/v1/galleries/{second.json()['id']}", json={"title": "Japan 2023"}, headers=auth_headers
    )
    assert renamed.status_code == 200
    assert renamed.json()["slug"] == "japan-2023-2"
