# blogcms/schemas/category.py
from pydantic import BaseModel, Field

from blogcms.domain.enums import ContentStatus
from blogcms.schemas.audit import PublishableRead


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, max_length=500)


class CategoryCreate(CategoryBase):
    status: ContentStatus = ContentStatus.draft


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, max_length=500)
    status: ContentStatus | None = None


class CategoryRead(PublishableRead):
    name: str
    slug: str
    description: str | None = None
