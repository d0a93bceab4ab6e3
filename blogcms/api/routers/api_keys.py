from typing import Any

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_user
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyRead
from blogcms.schemas.pagination import CursorPage
from blogcms.services import api_key_service

router = APIRouter(prefix="/api-keys", tags=["api-keys"])


@router.get("", response_model=CursorPage[ApiKeyRead])
async def list_api_keys(
    limit: int | None = Query(None, ge=1),
    cursor: str | None = Query(None),
    db: AsyncSession = Depends(get_async_db),
    current_user: dict[str, Any] = Depends(get_current_user),
):
    return await api_key_service.list_api_keys(db, limit=limit, cursor=cursor)


@router.post("", response_model=ApiKeyCreated, status_code=status.HTTP_201_CREATED)
async def create_api_key(
    payload: ApiKeyCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: dict[str, Any] = Depends(get_current_user),
):
    created = await api_key_service.create_api_key(db, payload, actor=f"user:{current_user['id']}")
    await commit_async(db)
    return created


@router.delete("/{api_key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_api_key(
    api_key_id: str = Path(...),
    db: AsyncSession = Depends(get_async_db),
    current_user: dict[str, Any] = Depends(get_current_user),
):
    await api_key_service.delete_api_key(db, api_key_id)
    await commit_async(db)
    return
