from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_actor
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.schemas.media import MediaRead, MediaUpdate
from blogcms.schemas.pagination import CursorPage
from blogcms.services import media_service

router = APIRouter(prefix="/media", tags=["media"])


@router.get("", response_model=CursorPage[MediaRead])
async def list_media(
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    return await media_service.list_media(db, limit=limit, cursor=cursor)


@router.get("/{media_id}", response_model=MediaRead)
async def get_media(media_id: str = Path(...), db: AsyncSession = Depends(get_async_db)):
    return await media_service.get_media(db, media_id)


# ---------- Admin ----------
@router.post("", response_model=MediaRead, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(..., description="Imagen o archivo a subir"),
    alternative_text: str | None = Form(None),
    caption: str | None = Form(None),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    content = await file.read()
    media = await media_service.upload_media(
        db,
        content=content,
        filename=file.filename or "upload",
        content_type=file.content_type,
        alternative_text=alternative_text,
        caption=caption,
        actor=actor,
    )
    await commit_async(db)
    return media


@router.put("/{media_id}", response_model=MediaRead)
async def update_media(
    payload: MediaUpdate,
    media_id: str = Path(...),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    media = await media_service.update_media(db, media_id, payload, actor)
    await commit_async(db)
    return media


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: str = Path(...),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    await media_service.delete_media(db, media_id)
    await commit_async(db)
    return
