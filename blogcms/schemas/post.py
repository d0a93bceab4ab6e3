# blogcms/schemas/post.py
from typing import Any

from pydantic import BaseModel, Field

from blogcms.domain.enums import ContentStatus
from blogcms.schemas.audit import PublishableRead


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=250)
    slug: str | None = Field(None, min_length=1, max_length=270)
    content: str | None = None
    rich_content: Any = None
    excerpt: str | None = Field(None, max_length=1000)
    read_time_minute: int | None = Field(None, ge=0)
    featured_picture_id: str | None = None
    category_id: str | None = None
    locale: str | None = Field(None, min_length=2, max_length=10)
    status: ContentStatus = ContentStatus.draft


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=250)
    slug: str | None = Field(None, min_length=1, max_length=270)
    content: str | None = None
    rich_content: Any = None
    excerpt: str | None = Field(None, max_length=1000)
    read_time_minute: int | None = Field(None, ge=0)
    featured_picture_id: str | None = None
    category_id: str | None = None
    status: ContentStatus | None = None


class PostRead(PublishableRead):
    title: str
    slug: str
    locale: str
    content: str | None = None
    rich_content: Any = None
    excerpt: str | None = None
    read_time_minute: int | None = None
    featured_picture_id: str | None = None
    category_id: str | None = None
