# blogcms/schemas/home.py
from pydantic import BaseModel, Field

from blogcms.domain.enums import ContentStatus
from blogcms.schemas.audit import PublishableRead


class HomeUpdate(BaseModel):
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    short_description: str | None = Field(None, max_length=500)
    keywords: str | None = Field(None, max_length=500)
    hero_image_id: str | None = None
    status: ContentStatus | None = None


class HomeRead(PublishableRead):
    title: str | None = None
    description: str | None = None
    short_description: str | None = None
    keywords: str | None = None
    hero_image_id: str | None = None
