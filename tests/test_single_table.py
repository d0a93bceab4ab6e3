# tests/test_single_table.py
import pytest

from blogcms.db.single_table import (
    decode_cursor,
    delete_item,
    find_first,
    get_item,
    put_item,
    query_index,
    scan,
    update_item,
)
from blogcms.entities.content import Category, Gallery, Post
from blogcms.services.exceptions import ConflictError, DomainValidationError


def _gallery(gallery_id: str, created_at: str, category_id: str | None = "cat_1") -> dict:
    return Gallery.prepare_create(
        {"id": gallery_id, "title": gallery_id, "slug": gallery_id, "category_id": category_id},
        now=created_at,
    )


@pytest.mark.asyncio
async def test_put_get_update_delete(async_db_session):
    record = Category.prepare_create({"id": "cat_1", "name": "Travel", "slug": "travel"})
    await put_item(async_db_session, Category, record)

    assert await get_item(async_db_session, Category, id="cat_1") == record
    assert await get_item(async_db_session, Gallery, id="cat_1") is None

    with pytest.raises(ConflictError):
        await put_item(async_db_session, Category, record)

    changed = Category.prepare_update(record, {"description": "Trips"})
    await update_item(async_db_session, Category, changed)
    stored = await get_item(async_db_session, Category, id="cat_1")
    assert stored["description"] == "Trips"

    assert await delete_item(async_db_session, Category, id="cat_1") is True
    assert await delete_item(async_db_session, Category, id="cat_1") is False


@pytest.mark.asyncio
async def test_query_index_orders_by_sort_key_and_pages(async_db_session):
    await put_item(async_db_session, Gallery, _gallery("g2", "2024-01-02T00:00:00.000000+00:00"))
    await put_item(async_db_session, Gallery, _gallery("g1", "2024-01-01T00:00:00.000000+00:00"))
    await put_item(async_db_session, Gallery, _gallery("g3", "2024-01-03T00:00:00.000000+00:00"))
    await put_item(async_db_session, Gallery, _gallery("other", "2024-01-01T00:00:00.000000+00:00", "cat_2"))
    # Un post en la misma partición no debe colarse en el listado de galerías.
    await put_item(
        async_db_session,
        Post,
        Post.prepare_create({"id": "p1", "title": "P", "slug": "p", "category_id": "cat_1"}),
    )

    first = await query_index(async_db_session, Gallery, "by_category", limit=2, category_id="cat_1")
    assert [g["id"] for g in first.items] == ["g1", "g2"]
    assert first.has_more is True and first.cursor

    second = await query_index(
        async_db_session, Gallery, "by_category", limit=2, cursor=first.cursor, category_id="cat_1"
    )
    assert [g["id"] for g in second.items] == ["g3"]
    assert second.has_more is False and second.cursor is None

    newest = await query_index(
        async_db_session, Gallery, "by_category", limit=10, descending=True, category_id="cat_1"
    )
    assert [g["id"] for g in newest.items] == ["g3", "g2", "g1"]


@pytest.mark.asyncio
async def test_update_moves_item_between_partitions(async_db_session):
    gallery = _gallery("g1", "2024-01-01T00:00:00.000000+00:00")
    await put_item(async_db_session, Gallery, gallery)
    await update_item(async_db_session, Gallery, Gallery.prepare_update(gallery, {"category_id": "cat_2"}))

    old = await query_index(async_db_session, Gallery, "by_category", limit=10, category_id="cat_1")
    new = await query_index(async_db_session, Gallery, "by_category", limit=10, category_id="cat_2")
    assert old.items == []
    assert [g["id"] for g in new.items] == ["g1"]


@pytest.mark.asyncio
async def test_scan_filters_and_find_first(async_db_session):
    for slug, status in (("a", "draft"), ("b", "published"), ("c", "published")):
        await put_item(
            async_db_session,
            Category,
            Category.prepare_create({"id": slug, "name": slug, "slug": slug, "status": status}),
        )

    published = await scan(async_db_session, Category, limit=10, filters={"status": "published"})
    assert sorted(c["id"] for c in published.items) == ["b", "c"]

    everything = await scan(async_db_session, Category, limit=10, filters={"status": None})
    assert len(everything.items) == 3

    paged = await scan(async_db_session, Category, limit=2)
    rest = await scan(async_db_session, Category, limit=2, cursor=paged.cursor)
    assert len(paged.items) == 2 and len(rest.items) == 1

    found = await find_first(async_db_session, Category, slug="b")
    assert found["id"] == "b"
    assert await find_first(async_db_session, Category, slug="zzz") is None


def test_bad_cursor_is_a_validation_error():
    with pytest.raises(DomainValidationError) as exc:
        decode_cursor("not-a-cursor!!", 2)
    assert exc.value.field == "cursor"
