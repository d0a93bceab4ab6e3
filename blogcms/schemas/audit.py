# blogcms/schemas/audit.py
from pydantic import BaseModel

from blogcms.domain.enums import ContentStatus


class AuditedRead(BaseModel):
    id: str
    created_at: str
    updated_at: str
    created_by: str | None = None
    updated_by: str | None = None


class PublishableRead(AuditedRead):
    status: ContentStatus
    published_at: str | None = None
