import re
import unicodedata
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.db.single_table import find_first
from blogcms.entities.base import Entity
from blogcms.services.exceptions import ConflictError, DomainValidationError


def slugify(text: str) -> str:
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-zA-Z0-9]+", "-", text).strip("-")
    return text.lower()


async def unique_slug(
    db: AsyncSession,
    entity: Entity,
    base_text: str,
    *,
    explicit: bool = False,
    exclude_id: str | None = None,
    **scope: Any,
) -> str:
    """Slugify ``base_text`` and make it unique among ``entity`` items.

    A slug derived from a name or title walks ``slug-2``, ``slug-3``, ... until
    it is free; an ``explicit`` slug chosen by the caller is kept as is and a
    clash raises ``ConflictError``.
    """
    slug = slugify(base_text)
    if not slug:
        raise DomainValidationError("Slug cannot be empty", field="slug")

    candidate = slug
    i = 2
    while True:
        existing = await find_first(db, entity, slug=candidate, **scope)
        if not existing or existing.get("id") == exclude_id:
            return candidate
        if explicit:
            raise ConflictError(f"{entity.name.capitalize()} with slug {candidate} already exists")
        candidate = f"{slug}-{i}"
        i += 1
