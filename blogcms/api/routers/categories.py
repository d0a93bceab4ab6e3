from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_actor
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.domain.enums import ContentStatus
from blogcms.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from blogcms.schemas.pagination import CursorPage
from blogcms.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


# ---------- Endpoints Públicos ----------
@router.get("", response_model=CursorPage[CategoryRead])
async def list_categories(
    status_filter: ContentStatus | None = Query(None, alias="status"),
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None, description="cursor opaco de la página anterior"),
    db: AsyncSession = Depends(get_async_db),
):
    return await category_service.list_categories(
        db,
        status=status_filter.value if status_filter else None,
        limit=limit,
        cursor=cursor,
    )


@router.get("/slug/{slug}", response_model=CategoryRead)
async def get_category_by_slug(slug: str, db: AsyncSession = Depends(get_async_db)):
    return await category_service.get_category_by_slug(db, slug)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: str = Path(..., description="ID de la categoría"),
    db: AsyncSession = Depends(get_async_db),
):
    return await category_service.get_category(db, category_id)


# ---------- Admin ----------
@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    category = await category_service.create_category(db, payload, actor)
    await commit_async(db)
    return category


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    payload: CategoryUpdate,
    category_id: str = Path(..., description="ID de la categoría"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    category = await category_service.update_category(db, category_id, payload, actor)
    await commit_async(db)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str = Path(..., description="ID de la categoría"),
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    await category_service.delete_category(db, category_id)
    await commit_async(db)
    return
