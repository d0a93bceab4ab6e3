# blogcms/db/single_table.py
"""Key-value operations over the ``content_items`` table.

Items are addressed by the keys an :class:`Entity` derives from a record;
callers never build ``PK``/``SK`` strings themselves.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.db.operations import flush_async
from blogcms.entities.base import Entity
from blogcms.models.item import ContentItem
from blogcms.services.exceptions import ConflictError, DomainValidationError, ResourceNotFoundError


@dataclass
class Page:
    items: list[dict[str, Any]] = field(default_factory=list)
    cursor: str | None = None
    has_more: bool = False


# ---------------- Cursors ----------------
def encode_cursor(parts: Sequence[str]) -> str:
    raw = json.dumps(list(parts), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(token: str, size: int) -> list[str]:
    padded = token + "=" * (-len(token) % 4)
    try:
        parts = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (ValueError, binascii.Error) as exc:
        raise DomainValidationError("Invalid pagination cursor", field="cursor") from exc
    if not isinstance(parts, list) or len(parts) != size or not all(isinstance(p, str) for p in parts):
        raise DomainValidationError("Invalid pagination cursor", field="cursor")
    return parts


def _seek(columns: Sequence[Any], values: Sequence[str], descending: bool) -> Any:
    """Row-value comparison ``(c1, c2, ...) > (v1, v2, ...)`` spelled out for portability."""
    clauses = []
    for i, column in enumerate(columns):
        equal = [c == v for c, v in zip(columns[:i], values[:i])]
        step = column < values[i] if descending else column > values[i]
        clauses.append(and_(*equal, step))
    return or_(*clauses)


def _page(rows: Sequence[ContentItem], limit: int, cursor_of: Callable[[ContentItem], list[str]]) -> Page:
    has_more = len(rows) > limit
    rows = list(rows[:limit])
    cursor = encode_cursor(cursor_of(rows[-1])) if has_more and rows else None
    return Page(items=[dict(row.data) for row in rows], cursor=cursor, has_more=has_more)


# ---------------- Items ----------------
async def _load(db: AsyncSession, entity: Entity, pk: str, sk: str) -> ContentItem | None:
    item = await db.get(ContentItem, (pk, sk))
    if item is None or item.entity != entity.name:
        return None
    return item


async def put_item(db: AsyncSession, entity: Entity, record: Mapping[str, Any]) -> dict[str, Any]:
    keys = entity.keys(record)
    if await db.get(ContentItem, (keys["pk"], keys["sk"])) is not None:
        raise ConflictError(f"Item {keys['pk']} already exists")
    item = ContentItem(entity=entity.name, data=dict(record), **keys)
    db.add(item)
    await flush_async(db, item)
    return dict(record)


async def get_item(db: AsyncSession, entity: Entity, **composites: Any) -> dict[str, Any] | None:
    pk, sk = entity.primary_key(**composites)
    item = await _load(db, entity, pk, sk)
    return dict(item.data) if item is not None else None


async def update_item(db: AsyncSession, entity: Entity, record: Mapping[str, Any]) -> dict[str, Any]:
    """Overwrite an existing item and re-derive every key from ``record``."""
    keys = entity.keys(record)
    item = await _load(db, entity, keys["pk"], keys["sk"])
    if item is None:
        raise ResourceNotFoundError.for_entity(entity.name, str(record.get("id")))
    item.data = dict(record)
    for column, value in keys.items():
        setattr(item, column, value)
    await flush_async(db, item)
    return dict(record)


async def delete_item(db: AsyncSession, entity: Entity, **composites: Any) -> bool:
    pk, sk = entity.primary_key(**composites)
    item = await _load(db, entity, pk, sk)
    if item is None:
        return False
    await db.delete(item)
    await flush_async(db)
    return True


# ---------------- Queries ----------------
async def query_index(
    db: AsyncSession,
    entity: Entity,
    access_pattern: str,
    *,
    limit: int,
    cursor: str | None = None,
    descending: bool = False,
    **composites: Any,
) -> Page:
    """Items of one partition of ``access_pattern``, ordered by its sort key."""
    access = entity.indexes[access_pattern]
    pk_name, sk_name = access.columns
    pk_column = getattr(ContentItem, pk_name)
    sk_column = getattr(ContentItem, sk_name)
    partition = entity.partition_key(access_pattern, **composites)

    stmt = select(ContentItem).where(ContentItem.entity == entity.name, pk_column == partition)
    # Several entities may share a partition (CATEGORY#x holds galleries and posts).
    prefix = access.sk.prefix
    if prefix:
        stmt = stmt.where(sk_column.startswith(prefix, autoescape=True))

    order = [sk_column, ContentItem.pk, ContentItem.sk]
    if cursor:
        stmt = stmt.where(_seek(order, decode_cursor(cursor, 3), descending))
    stmt = stmt.order_by(*[c.desc() if descending else c.asc() for c in order]).limit(limit + 1)

    rows = (await db.execute(stmt)).scalars().all()
    return _page(rows, limit, lambda row: [getattr(row, sk_name), row.pk, row.sk])


async def scan(
    db: AsyncSession,
    entity: Entity,
    *,
    limit: int,
    cursor: str | None = None,
    filters: Mapping[str, Any] | None = None,
) -> Page:
    """Every item of ``entity`` in key order, optionally filtered by attribute equality."""
    order = [ContentItem.pk, ContentItem.sk]
    stmt = select(ContentItem).where(ContentItem.entity == entity.name)
    if cursor:
        stmt = stmt.where(_seek(order, decode_cursor(cursor, 2), False))
    stmt = stmt.order_by(*order)

    conditions = {k: v for k, v in (filters or {}).items() if v is not None}
    matches: list[ContentItem] = []
    for row in (await db.execute(stmt)).scalars():
        if all(row.data.get(k) == v for k, v in conditions.items()):
            matches.append(row)
            if len(matches) > limit:
                break
    return _page(matches, limit, lambda row: [row.pk, row.sk])


async def find_first(db: AsyncSession, entity: Entity, **filters: Any) -> dict[str, Any] | None:
    page = await scan(db, entity, limit=1, filters=filters)
    return page.items[0] if page.items else None
