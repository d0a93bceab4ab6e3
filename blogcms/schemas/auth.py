# blogcms/schemas/auth.py
from pydantic import BaseModel, Field

from blogcms.schemas.user import UserRead


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = Field(default="bearer")
    expires_in: int
    user: UserRead


class TokenPayload(BaseModel):
    sub: str | None = None
    jti: str | None = None
    exp: int | None = None
