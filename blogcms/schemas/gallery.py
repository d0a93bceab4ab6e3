# blogcms/schemas/gallery.py
from pydantic import BaseModel, Field, field_validator

from blogcms.domain.enums import ContentStatus
from blogcms.schemas.audit import PublishableRead


def _unique_ids(value: list[str] | None) -> list[str] | None:
    if value is not None and len(value) != len(set(value)):
        raise ValueError("Duplicate image IDs are not allowed")
    return value


class GalleryCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=220)
    description: str | None = Field(None, max_length=2000)
    image_ids: list[str] | None = None
    category_id: str | None = None
    status: ContentStatus = ContentStatus.draft

    @field_validator("image_ids")
    @classmethod
    def validate_unique_ids(cls, value: list[str] | None) -> list[str] | None:
        return _unique_ids(value)


class GalleryUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=220)
    description: str | None = Field(None, max_length=2000)
    image_ids: list[str] | None = None
    category_id: str | None = None
    status: ContentStatus | None = None

    @field_validator("image_ids")
    @classmethod
    def validate_unique_ids(cls, value: list[str] | None) -> list[str] | None:
        return _unique_ids(value)


class GalleryRead(PublishableRead):
    title: str
    slug: str
    description: str | None = None
    image_ids: list[str] = Field(default_factory=list)
    category_id: str | None = None
