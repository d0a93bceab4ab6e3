# blogcms/domain/enums.py
import enum


class ContentStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
