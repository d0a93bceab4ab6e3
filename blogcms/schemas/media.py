# blogcms/schemas/media.py
from pydantic import BaseModel, Field

from blogcms.schemas.audit import AuditedRead


class MediaFormat(BaseModel):
    url: str
    width: int | None = None
    height: int | None = None


class MediaUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    alternative_text: str | None = Field(None, max_length=500)
    caption: str | None = Field(None, max_length=1000)


class MediaRead(AuditedRead):
    name: str
    url: str
    hash: str
    ext: str
    mime: str
    size: int
    alternative_text: str | None = None
    caption: str | None = None
    width: int | None = None
    height: int | None = None
    formats: dict[str, MediaFormat] = Field(default_factory=dict)
