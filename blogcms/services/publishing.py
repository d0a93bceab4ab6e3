"""Shared rules for status transitions, actors and page sizes."""

from __future__ import annotations

from typing import Any, Mapping

from blogcms.core.config import settings
from blogcms.entities.base import utcnow_iso


def page_size(limit: int | None) -> int:
    if not limit or limit < 1:
        return settings.DEFAULT_PAGE_SIZE
    return min(limit, settings.MAX_PAGE_SIZE)


def stamp_publication(changes: dict[str, Any], current: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Keep ``published_at`` in step with ``status``.

    Publishing sets it once (an already published item keeps its date);
    returning to draft clears it.
    """
    status = changes.get("status")
    if status == "published":
        if not (current or {}).get("published_at"):
            changes["published_at"] = utcnow_iso()
    elif status == "draft":
        changes["published_at"] = None
    return changes


def with_actor(changes: dict[str, Any], actor: str | None, *, creating: bool) -> dict[str, Any]:
    if actor:
        changes["updated_by"] = actor
        if creating:
            changes["created_by"] = actor
    return changes
