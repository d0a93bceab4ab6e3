# blogcms/api/deps.py
from typing import Any

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.config import settings
from blogcms.core.logging import security_alert
from blogcms.core.security import decode_access_token
from blogcms.db.session_async import get_async_db
from blogcms.schemas.auth import TokenPayload
from blogcms.services import api_key_service, user_service
from blogcms.services.exceptions import AuthenticationError


oauth2_scheme_optional = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False,
)


def _decode_token(token: str) -> tuple[TokenPayload, dict[str, Any]]:
    payload = decode_access_token(token)
    return TokenPayload(**payload), payload


async def get_token_payload(token: str | None = Depends(oauth2_scheme_optional)) -> dict[str, Any]:
    """Decoded claims of a valid, non-revoked bearer token."""
    if not token:
        raise AuthenticationError("Not authenticated")
    try:
        token_data, payload = _decode_token(token)
    except JWTError:
        raise AuthenticationError("Could not validate credentials")
    if token_data.sub is None:
        raise AuthenticationError("Could not validate credentials")
    return payload


async def get_current_user(
    db: AsyncSession = Depends(get_async_db),
    payload: dict[str, Any] = Depends(get_token_payload),
) -> dict[str, Any]:
    user = await user_service.get_by_id(db, payload["sub"])
    if user is None or not user.get("is_active"):
        raise AuthenticationError("Could not validate credentials")
    return user


async def get_current_actor(
    db: AsyncSession = Depends(get_async_db),
    token: str | None = Depends(oauth2_scheme_optional),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str:
    """
    Identidad de quien escribe: un usuario con bearer token o una API key.
    Devuelve ``user:<id>`` o ``apikey:<id>`` para los campos de auditoría.
    """
    if token:
        payload = await get_token_payload(token)
        user = await get_current_user(db, payload)
        return f"user:{user['id']}"

    if x_api_key:
        api_key = await api_key_service.authenticate_api_key(db, x_api_key)
        if api_key is None:
            security_alert("Rejected API key", prefix=x_api_key[:12])
            raise AuthenticationError("Invalid API key")
        return f"apikey:{api_key['id']}"

    raise AuthenticationError("Not authenticated")
