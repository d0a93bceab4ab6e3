# blogcms/schemas/user.py
from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    name: str | None = None
    password: str = Field(min_length=8)


class UserRead(BaseModel):
    id: str
    email: EmailStr
    name: str | None = None
    is_active: bool
    last_login_at: str | None = None
