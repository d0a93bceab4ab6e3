from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.logging import get_logger
from blogcms.core.security import generate_api_key, hash_api_key
from blogcms.db.single_table import Page, delete_item, put_item, query_index, scan, update_item
from blogcms.entities.accounts import ApiKey
from blogcms.entities.base import utcnow_iso
from blogcms.schemas.api_key import ApiKeyCreate
from blogcms.services.exceptions import ResourceNotFoundError
from blogcms.services.publishing import page_size

logger = get_logger(__name__)

# Caracteres de la clave que se muestran en el listado.
DISPLAY_PREFIX_LENGTH = 12


async def list_api_keys(db: AsyncSession, *, limit: int | None = None, cursor: str | None = None) -> Page:
    page = await scan(db, ApiKey, limit=page_size(limit), cursor=cursor)
    page.items = [ApiKey.public(item) for item in page.items]
    return page


async def create_api_key(db: AsyncSession, payload: ApiKeyCreate, actor: str | None = None) -> dict[str, Any]:
    """Persist a new key. The raw key is part of the result and is never stored."""
    raw_key = generate_api_key()
    record = ApiKey.prepare_create(
        {
            "id": uuid.uuid4().hex,
            "name": payload.name,
            "prefix": raw_key[:DISPLAY_PREFIX_LENGTH],
            "key_hash": hash_api_key(raw_key),
            "created_by": actor,
        }
    )
    stored = await put_item(db, ApiKey, record)
    logger.info("API key created", extra={"api_key_id": stored["id"], "created_by": actor})
    return {**ApiKey.public(stored), "key": raw_key}


async def delete_api_key(db: AsyncSession, api_key_id: str) -> None:
    if not await delete_item(db, ApiKey, id=api_key_id):
        raise ResourceNotFoundError.for_entity("API key", api_key_id)
    logger.info("API key deleted", extra={"api_key_id": api_key_id})


async def authenticate_api_key(db: AsyncSession, raw_key: str) -> dict[str, Any] | None:
    page = await query_index(db, ApiKey, "by_hash", limit=1, key_hash=hash_api_key(raw_key))
    if not page.items:
        return None
    api_key = page.items[0]
    return await update_item(db, ApiKey, ApiKey.prepare_update(api_key, {"last_used_at": utcnow_iso()}))
