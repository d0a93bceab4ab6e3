from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_actor
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.domain.enums import ContentStatus
from blogcms.schemas.pagination import CursorPage
from blogcms.schemas.post import PostCreate, PostRead, PostUpdate
from blogcms.services import post_service

router = APIRouter(prefix="/posts", tags=["posts"])


# ---------- Endpoints Públicos ----------
@router.get("", response_model=CursorPage[PostRead])
async def list_posts(
    category_id: str | None = Query(None),
    status_filter: ContentStatus | None = Query(None, alias="status"),
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    return await post_service.list_posts(
        db,
        category_id=category_id,
        status=status_filter.value if status_filter else None,
        locale=locale,
        limit=limit,
        cursor=cursor,
    )


@router.get("/slug/{slug}", response_model=PostRead)
async def get_post_by_slug(
    slug: str,
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    db: AsyncSession = Depends(get_async_db),
):
    return await post_service.get_post_by_slug(db, slug, locale)


@router.get("/{post_id}", response_model=PostRead)
async def get_post(
    post_id: str = Path(..., description="ID del post"),
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    db: AsyncSession = Depends(get_async_db),
):
    return await post_service.get_post(db, post_id, locale)


# ---------- Admin ----------
@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    post = await post_service.create_post(db, payload, actor)
    await commit_async(db)
    return post


@router.put("/{post_id}", response_model=PostRead)
async def update_post(
    payload: PostUpdate,
    post_id: str = Path(..., description="ID del post"),
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    post = await post_service.update_post(db, post_id, payload, actor, locale)
    await commit_async(db)
    return post


@router.post("/{post_id}/publish", response_model=PostRead)
async def publish_post(
    post_id: str = Path(..., description="ID del post"),
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    post = await post_service.publish_post(db, post_id, actor, locale)
    await commit_async(db)
    return post


@router.post("/{post_id}/unpublish", response_model=PostRead)
async def unpublish_post(
    post_id: str = Path(..., description="ID del post"),
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    post = await post_service.unpublish_post(db, post_id, actor, locale)
    await commit_async(db)
    return post


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str = Path(..., description="ID del post"),
    locale: str | None = Query(None, min_length=2, max_length=10, description="Idioma; por defecto DEFAULT_LOCALE"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    await post_service.delete_post(db, post_id, locale)
    await commit_async(db)
    return
