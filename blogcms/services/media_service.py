from __future__ import annotations

import hashlib
import mimetypes
import uuid
from pathlib import PurePath
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.logging import get_logger
from blogcms.core.metrics import record_content_mutation
from blogcms.db.single_table import Page, delete_item, get_item, put_item, scan, update_item
from blogcms.entities.content import Media
from blogcms.schemas.media import MediaUpdate
from blogcms.services import cloudinary_service
from blogcms.services.exceptions import DomainValidationError, ResourceNotFoundError
from blogcms.services.publishing import page_size, with_actor

logger = get_logger(__name__)


async def list_media(db: AsyncSession, *, limit: int | None = None, cursor: str | None = None) -> Page:
    return await scan(db, Media, limit=page_size(limit), cursor=cursor)


async def get_media(db: AsyncSession, media_id: str) -> dict[str, Any]:
    media = await get_item(db, Media, id=media_id)
    if media is None:
        raise ResourceNotFoundError.for_entity("media", media_id)
    return media


async def upload_media(
    db: AsyncSession,
    *,
    content: bytes,
    filename: str,
    content_type: str | None = None,
    alternative_text: str | None = None,
    caption: str | None = None,
    actor: str | None = None,
) -> dict[str, Any]:
    if not content:
        raise DomainValidationError("Uploaded file is empty", field="file")

    path = PurePath(filename or "upload")
    mime = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    result = await cloudinary_service.upload_bytes(content, filename=path.stem)

    width = result.get("width")
    height = result.get("height")
    data = {
        "id": uuid.uuid4().hex,
        "name": path.name,
        "alternative_text": alternative_text,
        "caption": caption,
        "width": width,
        "height": height,
        "url": cloudinary_service.public_url(result.get("secure_url") or result["url"]),
        "formats": cloudinary_service.build_formats(result["public_id"], width, height),
        "hash": hashlib.sha256(content).hexdigest()[:32],
        "ext": path.suffix.lower() or f".{result.get('format', 'bin')}",
        "mime": mime,
        "size": len(content),
        "provider_id": result["public_id"],
    }
    with_actor(data, actor, creating=True)

    media = await put_item(db, Media, Media.prepare_create(data))
    record_content_mutation("media", "create")
    logger.info("Media uploaded", extra={"media_id": media["id"], "size": media["size"], "mime": mime})
    return media


async def update_media(
    db: AsyncSession, media_id: str, payload: MediaUpdate, actor: str | None = None
) -> dict[str, Any]:
    current = await get_media(db, media_id)
    changes = with_actor(payload.model_dump(exclude_unset=True), actor, creating=False)
    media = await update_item(db, Media, Media.prepare_update(current, changes))
    record_content_mutation("media", "update")
    return media


async def delete_media(db: AsyncSession, media_id: str) -> None:
    media = await get_media(db, media_id)
    await delete_item(db, Media, id=media_id)
    if not await cloudinary_service.destroy(media.get("provider_id", "")):
        logger.warning("Remote asset not removed", extra={"media_id": media_id})
    record_content_mutation("media", "delete")
