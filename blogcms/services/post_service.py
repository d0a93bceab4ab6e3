from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.config import settings
from blogcms.core.logging import get_logger
from blogcms.core.metrics import record_content_mutation
from blogcms.db.single_table import Page, delete_item, find_first, get_item, put_item, query_index, scan, update_item
from blogcms.entities.content import Category, Post
from blogcms.schemas.post import PostCreate, PostUpdate
from blogcms.services.exceptions import DomainValidationError, ResourceNotFoundError
from blogcms.services.publishing import page_size, stamp_publication, with_actor
from blogcms.utils.slugify import unique_slug

logger = get_logger(__name__)


def _locale(locale: str | None) -> str:
    return locale or settings.DEFAULT_LOCALE


async def _ensure_category(db: AsyncSession, category_id: str | None) -> None:
    if category_id and await get_item(db, Category, id=category_id) is None:
        raise DomainValidationError(f"Category {category_id} does not exist", field="category_id")


# ---------------- Lectura pública ----------------
async def list_posts(
    db: AsyncSession,
    *,
    category_id: str | None = None,
    status: str | None = None,
    locale: str | None = None,
    limit: int | None = None,
    cursor: str | None = None,
) -> Page:
    """List posts through the cheapest access pattern available.

    - by category: GSI1, oldest first
    - published only: GSI3, most recently published first
    - anything else: filtered scan
    """
    size = page_size(limit)
    if category_id:
        page = await query_index(db, Post, "by_category", limit=size, cursor=cursor, category_id=category_id)
        page.items = [
            p for p in page.items
            if (not status or p.get("status") == status) and (not locale or p.get("locale") == locale)
        ]
        return page
    if status == "published":
        page = await query_index(
            db, Post, "by_status", limit=size, cursor=cursor, descending=True, status="published"
        )
        if locale:
            page.items = [p for p in page.items if p.get("locale") == locale]
        return page
    return await scan(db, Post, limit=size, cursor=cursor, filters={"status": status, "locale": locale})


async def get_post(db: AsyncSession, post_id: str, locale: str | None = None) -> dict[str, Any]:
    post = await get_item(db, Post, id=post_id, locale=_locale(locale))
    if post is None:
        raise ResourceNotFoundError.for_entity("post", post_id)
    return post


async def get_post_by_slug(db: AsyncSession, slug: str, locale: str | None = None) -> dict[str, Any]:
    post = await find_first(db, Post, slug=slug, locale=_locale(locale))
    if post is None:
        raise ResourceNotFoundError(f"Post with slug {slug} not found")
    return post


# ---------------- Admin CRUD ----------------
async def create_post(db: AsyncSession, payload: PostCreate, actor: str | None = None) -> dict[str, Any]:
    data = payload.model_dump(mode="json")
    await _ensure_category(db, data.get("category_id"))

    data["id"] = uuid.uuid4().hex
    data["locale"] = _locale(data.get("locale"))
    data["slug"] = await unique_slug(
        db, Post, data.get("slug") or data["title"], explicit=bool(data.get("slug")), locale=data["locale"]
    )
    stamp_publication(data)
    with_actor(data, actor, creating=True)

    post = await put_item(db, Post, Post.prepare_create(data))
    record_content_mutation("post", "create")
    logger.info("Post created", extra={"post_id": post["id"], "locale": post["locale"]})
    return post


async def update_post(
    db: AsyncSession,
    post_id: str,
    payload: PostUpdate | dict[str, Any],
    actor: str | None = None,
    locale: str | None = None,
) -> dict[str, Any]:
    current = await get_post(db, post_id, locale)
    if isinstance(payload, PostUpdate):
        changes = payload.model_dump(mode="json", exclude_unset=True)
    else:
        changes = dict(payload)

    if "category_id" in changes and changes["category_id"] != current.get("category_id"):
        await _ensure_category(db, changes["category_id"])
    if "slug" in changes or ("title" in changes and changes["title"] != current["title"]):
        target = changes.get("slug") or changes.get("title") or current["title"]
        changes["slug"] = await unique_slug(
            db, Post, target, explicit=bool(changes.get("slug")), exclude_id=post_id, locale=current["locale"]
        )
    stamp_publication(changes, current)
    with_actor(changes, actor, creating=False)

    post = await update_item(db, Post, Post.prepare_update(current, changes))
    record_content_mutation("post", "update")
    return post


async def publish_post(
    db: AsyncSession, post_id: str, actor: str | None = None, locale: str | None = None
) -> dict[str, Any]:
    return await update_post(db, post_id, {"status": "published"}, actor, locale)


async def unpublish_post(
    db: AsyncSession, post_id: str, actor: str | None = None, locale: str | None = None
) -> dict[str, Any]:
    return await update_post(db, post_id, {"status": "draft"}, actor, locale)


async def delete_post(db: AsyncSession, post_id: str, locale: str | None = None) -> None:
    if not await delete_item(db, Post, id=post_id, locale=_locale(locale)):
        raise ResourceNotFoundError.for_entity("post", post_id)
    record_content_mutation("post", "delete")
    logger.info("Post deleted", extra={"post_id": post_id})
