from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.api.deps import get_current_user, get_token_payload
from blogcms.core.config import settings
from blogcms.core.logging import get_logger, security_alert
from blogcms.core.metrics import record_login_attempt
from blogcms.core.security import create_access_token, revoke_access_token
from blogcms.db.operations import commit_async
from blogcms.db.session_async import get_async_db
from blogcms.schemas.auth import TokenResponse
from blogcms.schemas.user import UserRead
from blogcms.services import user_service
from blogcms.services.exceptions import AuthenticationError

router = APIRouter(prefix="/auth", tags=["auth"])

auth_logger = get_logger("blogcms.auth")


def _client_ip(request: Request | None) -> str | None:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    client = request.client
    return client.host if client else None


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_async_db),
):
    user = await user_service.authenticate(db, form_data.username, form_data.password)
    if not user:
        record_login_attempt("failure")
        security_alert(
            "Failed login attempt",
            email=form_data.username,
            client_ip=_client_ip(request),
        )
        raise AuthenticationError("Incorrect email or password")

    record_login_attempt("success")
    access = create_access_token(subject=user["id"])
    user = await user_service.mark_login(db, user)
    await commit_async(db)

    auth_logger.info(
        "User authenticated",
        extra={"user_id": user["id"], "email": user["email"], "client_ip": _client_ip(request)},
    )

    return {
        "access_token": access,
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "user": UserRead.model_validate(user),
    }


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(payload: dict[str, Any] = Depends(get_token_payload)):
    revoke_access_token(payload)
    auth_logger.info("User logged out", extra={"user_id": payload.get("sub")})
    return


@router.get("/me", response_model=UserRead)
async def read_me(current_user: dict[str, Any] = Depends(get_current_user)):
    return current_user
