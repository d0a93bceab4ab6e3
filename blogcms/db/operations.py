# blogcms/db/operations.py
"""Common async session helpers.

Writes go through these helpers so that database failures reach the API as
service errors: a uniqueness violation is a ``ConflictError`` (409) and any
other SQLAlchemy failure a ``StorageUnavailableError`` (503).
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.services.exceptions import ConflictError, ServiceError, StorageUnavailableError

logger = logging.getLogger(__name__)


def _coerce_iter(items: Iterable[Any] | None) -> list[Any] | None:
    if not items:
        return None
    return list(items)


def translate_db_error(exc: SQLAlchemyError) -> ServiceError:
    if isinstance(exc, IntegrityError):
        return ConflictError("Item already exists")
    return StorageUnavailableError("Database unavailable")


async def commit_async(session: AsyncSession) -> None:
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning("Commit failed", extra={"error": type(exc).__name__})
        raise translate_db_error(exc) from exc
    except Exception:
        await session.rollback()
        raise


async def flush_async(session: AsyncSession, *objects: Any) -> None:
    try:
        await session.flush(_coerce_iter(objects))
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning("Flush failed", extra={"error": type(exc).__name__})
        raise translate_db_error(exc) from exc
