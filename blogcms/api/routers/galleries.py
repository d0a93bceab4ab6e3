from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_actor
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.domain.enums import ContentStatus
from blogcms.schemas.gallery import GalleryCreate, GalleryRead, GalleryUpdate
from blogcms.schemas.pagination import CursorPage
from blogcms.services import gallery_service

router = APIRouter(prefix="/galleries", tags=["galleries"])


# ---------- Endpoints Públicos ----------
@router.get("", response_model=CursorPage[GalleryRead])
async def list_galleries(
    category_id: str | None = Query(None, description="Filtra por categoría (GSI1)"),
    status_filter: ContentStatus | None = Query(None, alias="status"),
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    return await gallery_service.list_galleries(
        db,
        category_id=category_id,
        status=status_filter.value if status_filter else None,
        limit=limit,
        cursor=cursor,
    )


@router.get("/slug/{slug}", response_model=GalleryRead)
async def get_gallery_by_slug(slug: str, db: AsyncSession = Depends(get_async_db)):
    return await gallery_service.get_gallery_by_slug(db, slug)


@router.get("/{gallery_id}", response_model=GalleryRead)
async def get_gallery(
    gallery_id: str = Path(..., description="ID de la galería"),
    db: AsyncSession = Depends(get_async_db),
):
    return await gallery_service.get_gallery(db, gallery_id)


# ---------- Admin ----------
@router.post("", response_model=GalleryRead, status_code=status.HTTP_201_CREATED)
async def create_gallery(
    payload: GalleryCreate,
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    gallery = await gallery_service.create_gallery(db, payload, actor)
    await commit_async(db)
    return gallery


@router.put("/{gallery_id}", response_model=GalleryRead)
async def update_gallery(
    payload: GalleryUpdate,
    gallery_id: str = Path(..., description="ID de la galería"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    gallery = await gallery_service.update_gallery(db, gallery_id, payload, actor)
    await commit_async(db)
    return gallery


@router.post("/{gallery_id}/publish", response_model=GalleryRead)
async def publish_gallery(
    gallery_id: str = Path(..., description="ID de la galería"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    gallery = await gallery_service.publish_gallery(db, gallery_id, actor)
    await commit_async(db)
    return gallery


@router.post("/{gallery_id}/unpublish", response_model=GalleryRead)
async def unpublish_gallery(
    gallery_id: str = Path(..., description="ID de la galería"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    gallery = await gallery_service.unpublish_gallery(db, gallery_id, actor)
    await commit_async(db)
    return gallery


@router.delete("/{gallery_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery(
    gallery_id: str = Path(..., description="ID de la galería"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    await gallery_service.delete_gallery(db, gallery_id)
    await commit_async(db)
    return
