from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.logging import get_logger
from blogcms.core.metrics import record_content_mutation
from blogcms.db.single_table import Page, delete_item, find_first, get_item, put_item, query_index, scan, update_item
from blogcms.entities.content import Category, Gallery, Post
from blogcms.schemas.category import CategoryCreate, CategoryUpdate
from blogcms.services.exceptions import ConflictError, ResourceNotFoundError
from blogcms.services.publishing import page_size, stamp_publication, with_actor
from blogcms.utils.slugify import unique_slug

logger = get_logger(__name__)


# ---------------- Lectura pública ----------------
async def list_categories(
    db: AsyncSession,
    *,
    status: str | None = None,
    limit: int | None = None,
    cursor: str | None = None,
) -> Page:
    return await scan(db, Category, limit=page_size(limit), cursor=cursor, filters={"status": status})


async def get_category(db: AsyncSession, category_id: str) -> dict[str, Any]:
    category = await get_item(db, Category, id=category_id)
    if category is None:
        raise ResourceNotFoundError.for_entity("category", category_id)
    return category


async def get_category_by_slug(db: AsyncSession, slug: str) -> dict[str, Any]:
    category = await find_first(db, Category, slug=slug)
    if category is None:
        raise ResourceNotFoundError(f"Category with slug {slug} not found")
    return category


# ---------------- Admin CRUD ----------------
async def create_category(db: AsyncSession, payload: CategoryCreate, actor: str | None = None) -> dict[str, Any]:
    data = payload.model_dump(mode="json")
    data["id"] = uuid.uuid4().hex
    data["slug"] = await unique_slug(db, Category, data.get("slug") or data["name"], explicit=bool(data.get("slug")))
    stamp_publication(data)
    with_actor(data, actor, creating=True)

    category = await put_item(db, Category, Category.prepare_create(data))
    record_content_mutation("category", "create")
    logger.info("Category created", extra={"category_id": category["id"], "slug": category["slug"]})
    return category


async def update_category(
    db: AsyncSession,
    category_id: str,
    payload: CategoryUpdate,
    actor: str | None = None,
) -> dict[str, Any]:
    current = await get_category(db, category_id)
    changes = payload.model_dump(mode="json", exclude_unset=True)

    if "slug" in changes or ("name" in changes and changes["name"] != current["name"]):
        target = changes.get("slug") or changes.get("name") or current["name"]
        changes["slug"] = await unique_slug(
            db, Category, target, explicit=bool(changes.get("slug")), exclude_id=category_id
        )
    stamp_publication(changes, current)
    with_actor(changes, actor, creating=False)

    category = await update_item(db, Category, Category.prepare_update(current, changes))
    record_content_mutation("category", "update")
    return category


async def delete_category(db: AsyncSession, category_id: str) -> None:
    await get_category(db, category_id)
    # Galleries and posts point at the category through their GSI1 partition.
    for entity in (Gallery, Post):
        page = await query_index(db, entity, "by_category", limit=1, category_id=category_id)
        if page.items:
            raise ConflictError(f"Category {category_id} still has {entity.name} items")

    await delete_item(db, Category, id=category_id)
    record_content_mutation("category", "delete")
    logger.info("Category deleted", extra={"category_id": category_id})
