from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.logging import get_logger
from blogcms.core.metrics import record_content_mutation
from blogcms.db.single_table import Page, delete_item, find_first, get_item, put_item, query_index, scan, update_item
from blogcms.entities.content import Category, Gallery
from blogcms.schemas.gallery import GalleryCreate, GalleryUpdate
from blogcms.services.exceptions import DomainValidationError, ResourceNotFoundError
from blogcms.services.publishing import page_size, stamp_publication, with_actor
from blogcms.utils.slugify import unique_slug

logger = get_logger(__name__)


async def _ensure_category(db: AsyncSession, category_id: str | None) -> None:
    if category_id and await get_item(db, Category, id=category_id) is None:
        raise DomainValidationError(f"Category {category_id} does not exist", field="category_id")


# ---------------- Lectura pública ----------------
async def list_galleries(
    db: AsyncSession,
    *,
    category_id: str | None = None,
    status: str | None = None,
    limit: int | None = None,
    cursor: str | None = None,
) -> Page:
    """Galleries of one category oldest first, or every gallery in key order."""
    size = page_size(limit)
    if category_id:
        page = await query_index(db, Gallery, "by_category", limit=size, cursor=cursor, category_id=category_id)
        if status:
            page.items = [g for g in page.items if g.get("status") == status]
        return page
    return await scan(db, Gallery, limit=size, cursor=cursor, filters={"status": status})


async def get_gallery(db: AsyncSession, gallery_id: str) -> dict[str, Any]:
    gallery = await get_item(db, Gallery, id=gallery_id)
    if gallery is None:
        raise ResourceNotFoundError.for_entity("gallery", gallery_id)
    return gallery


async def get_gallery_by_slug(db: AsyncSession, slug: str) -> dict[str, Any]:
    gallery = await find_first(db, Gallery, slug=slug)
    if gallery is None:
        raise ResourceNotFoundError(f"Gallery with slug {slug} not found")
    return gallery


# ---------------- Admin CRUD ----------------
async def create_gallery(db: AsyncSession, payload: GalleryCreate, actor: str | None = None) -> dict[str, Any]:
    data = payload.model_dump(mode="json")
    await _ensure_category(db, data.get("category_id"))

    data["id"] = uuid.uuid4().hex
    data["slug"] = await unique_slug(db, Gallery, data.get("slug") or data["title"], explicit=bool(data.get("slug")))
    stamp_publication(data)
    with_actor(data, actor, creating=True)

    gallery = await put_item(db, Gallery, Gallery.prepare_create(data))
    record_content_mutation("gallery", "create")
    logger.info(
        "Gallery created",
        extra={"gallery_id": gallery["id"], "category_id": gallery.get("category_id")},
    )
    return gallery


async def update_gallery(
    db: AsyncSession,
    gallery_id: str,
    payload: GalleryUpdate | dict[str, Any],
    actor: str | None = None,
) -> dict[str, Any]:
    current = await get_gallery(db, gallery_id)
    if isinstance(payload, GalleryUpdate):
        changes = payload.model_dump(mode="json", exclude_unset=True)
    else:
        changes = dict(payload)

    if "category_id" in changes and changes["category_id"] != current.get("category_id"):
        await _ensure_category(db, changes.get("category_id"))
    if "slug" in changes or ("title" in changes and changes["title"] != current["title"]):
        target = changes.get("slug") or changes.get("title") or current["title"]
        changes["slug"] = await unique_slug(
            db, Gallery, target, explicit=bool(changes.get("slug")), exclude_id=gallery_id
        )
    stamp_publication(changes, current)
    with_actor(changes, actor, creating=False)

    # update_item re-derives the GSI1 keys, so a category change moves the gallery.
    gallery = await update_item(db, Gallery, Gallery.prepare_update(current, changes))
    record_content_mutation("gallery", "update")
    return gallery


async def publish_gallery(db: AsyncSession, gallery_id: str, actor: str | None = None) -> dict[str, Any]:
    return await update_gallery(db, gallery_id, {"status": "published"}, actor)


async def unpublish_gallery(db: AsyncSession, gallery_id: str, actor: str | None = None) -> dict[str, Any]:
    return await update_gallery(db, gallery_id, {"status": "draft"}, actor)


async def delete_gallery(db: AsyncSession, gallery_id: str) -> None:
    if not await delete_item(db, Gallery, id=gallery_id):
        raise ResourceNotFoundError.for_entity("gallery", gallery_id)
    record_content_mutation("gallery", "delete")
    logger.info("Gallery deleted", extra={"gallery_id": gallery_id})
