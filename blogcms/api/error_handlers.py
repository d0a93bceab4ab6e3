from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from blogcms.core.logging import get_logger
from blogcms.db.operations import translate_db_error
from blogcms.services.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainValidationError,
    ResourceNotFoundError,
    ServiceError,
    StorageUnavailableError,
)

logger = get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ResourceNotFoundError)
    async def handle_not_found(_: Request, exc: ResourceNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(DomainValidationError)
    async def handle_validation(_: Request, exc: DomainValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail, "field": exc.field})

    @app.exception_handler(ConflictError)
    async def handle_conflict(_: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(_: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"detail": exc.detail},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(StorageUnavailableError)
    async def handle_storage(_: Request, exc: StorageUnavailableError) -> JSONResponse:
        logger.warning("Storage unavailable: %s", exc.detail)
        return JSONResponse(status_code=503, content={"detail": exc.detail})

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        # Lecturas fuera de commit_async/flush_async llegan aquí sin traducir.
        error = translate_db_error(exc)
        logger.warning("Database error: %s", type(exc).__name__, extra={"path": request.url.path})
        status_code = 409 if isinstance(error, ConflictError) else 503
        return JSONResponse(status_code=status_code, content={"detail": error.detail})

    @app.exception_handler(ServiceError)
    async def handle_service_error(_: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.detail})
