# blogcms/schemas/pagination.py
from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class CursorPage(BaseModel, Generic[T]):
    items: List[T]
    cursor: str | None = None
    has_more: bool = False
