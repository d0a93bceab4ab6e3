from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_actor
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.schemas.home import HomeRead, HomeUpdate
from blogcms.services import home_service
from blogcms.services.exceptions import ConflictError

router = APIRouter(prefix="/home", tags=["home"])


@router.get("", response_model=HomeRead)
async def get_home(db: AsyncSession = Depends(get_async_db)):
    home = await home_service.get_home(db)
    # La primera lectura puede crear el registro por defecto.
    try:
        await commit_async(db)
    except ConflictError:
        # Dos primeras lecturas a la vez: gana la que confirmó antes.
        home = await home_service.get_home(db)
    return home


@router.put("", response_model=HomeRead)
async def update_home(
    payload: HomeUpdate,
    db: AsyncSession = Depends(get_async_db),
    actor: str = Depends(get_current_actor),
):
    home = await home_service.update_home(db, payload, actor)
    await commit_async(db)
    return home
