from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.core.security import get_password_hash, verify_password
from blogcms.db.single_table import get_item, put_item, query_index, update_item
from blogcms.entities.accounts import User
from blogcms.entities.base import utcnow_iso
from blogcms.schemas.user import UserCreate
from blogcms.services.exceptions import ConflictError


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_by_email(db: AsyncSession, email: str) -> dict[str, Any] | None:
    page = await query_index(db, User, "by_email", limit=1, email=_normalize_email(email))
    return page.items[0] if page.items else None


async def get_by_id(db: AsyncSession, user_id: str) -> dict[str, Any] | None:
    return await get_item(db, User, id=user_id)


async def create_user(db: AsyncSession, data: UserCreate) -> dict[str, Any]:
    email = _normalize_email(data.email)
    if await get_by_email(db, email):
        raise ConflictError("A user with this email already exists")
    record = User.prepare_create(
        {
            "id": uuid.uuid4().hex,
            "email": email,
            "name": data.name,
            "hashed_password": get_password_hash(data.password),
        }
    )
    return await put_item(db, User, record)


async def authenticate(db: AsyncSession, email: str, password: str) -> dict[str, Any] | None:
    user = await get_by_email(db, email)
    if not user or not user.get("is_active"):
        return None
    if not verify_password(password, user["hashed_password"]):
        return None
    return user


async def mark_login(db: AsyncSession, user: dict[str, Any]) -> dict[str, Any]:
    return await update_item(db, User, User.prepare_update(user, {"last_login_at": utcnow_iso()}))
