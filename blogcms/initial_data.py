# blogcms/initial_data.py
import logging

from blogcms.core.config import settings
from blogcms.db.operations import commit_async
from blogcms.db.session_async import AsyncSessionLocal
from blogcms.schemas.user import UserCreate
from blogcms.services import user_service
from blogcms.services.exceptions import ConflictError

logger = logging.getLogger(__name__)


async def create_initial_admin_user() -> None:
    """
    Crea el admin inicial si hay credenciales en env (.env) y el usuario
    todavía no existe. Es idempotente: varios workers pueden llamarlo.
    """
    if not settings.INITIAL_ADMIN_EMAIL or not settings.INITIAL_ADMIN_PASSWORD:
        logger.info("Skipping admin init: faltan INITIAL_ADMIN_EMAIL o INITIAL_ADMIN_PASSWORD.")
        return

    email = str(settings.INITIAL_ADMIN_EMAIL)
    async with AsyncSessionLocal() as session:
        if await user_service.get_by_email(session, email):
            logger.info("El usuario inicial ya existe; nada que hacer.", extra={"email": email})
            return

        user_in = UserCreate(email=email, password=settings.INITIAL_ADMIN_PASSWORD, name="Admin")
        try:
            user = await user_service.create_user(session, user_in)
            await commit_async(session)
        except ConflictError:
            # Otro worker lo creó entre la verificación y el insert.
            logger.info("El usuario inicial fue creado por otro proceso.", extra={"email": email})
            return

        logger.info("Usuario admin creado correctamente.", extra={"user_id": user["id"], "email": email})
