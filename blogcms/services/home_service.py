from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.logging import get_logger
from blogcms.core.metrics import record_content_mutation
from blogcms.db.single_table import get_item, put_item, update_item
from blogcms.entities.content import Home
from blogcms.schemas.home import HomeUpdate
from blogcms.services.exceptions import ConflictError
from blogcms.services.publishing import stamp_publication, with_actor

logger = get_logger(__name__)

HOME_ID = "home"


async def get_home(db: AsyncSession) -> dict[str, Any]:
    """Return the home singleton, creating an empty draft the first time."""
    home = await get_item(db, Home, id=HOME_ID)
    if home is None:
        try:
            home = await put_item(db, Home, Home.prepare_create({"id": HOME_ID}))
        except ConflictError:
            # Otra petición la creó entre la lectura y el insert.
            home = await get_item(db, Home, id=HOME_ID)
            if home is None:
                raise
            return home
        logger.info("Home page initialised")
    return home


async def update_home(db: AsyncSession, payload: HomeUpdate, actor: str | None = None) -> dict[str, Any]:
    current = await get_home(db)
    changes = payload.model_dump(mode="json", exclude_unset=True)
    stamp_publication(changes, current)
    with_actor(changes, actor, creating=False)

    home = await update_item(db, Home, Home.prepare_update(current, changes))
    record_content_mutation("home", "update")
    return home
