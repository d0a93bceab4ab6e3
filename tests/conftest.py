# tests/conftest.py
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import os
import uuid
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-blogcms")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ["REDIS_URL"] = ""

from blogcms.main import app
from blogcms.db.operations import commit_async
from blogcms.db.session import Base
from blogcms.db.session_async import AsyncSessionLocal, async_engine
from blogcms.schemas.user import UserCreate
from blogcms.services import user_service

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
ADMIN_PASSWORD = "Admin1234"

sync_engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})


# ---------- Fixtures ----------
@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Crea la tabla única en SQLite solo una vez por sesión de tests."""
    import blogcms.models.item  # noqa: F401

    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with sync_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest_asyncio.fixture(autouse=True)
async def dispose_async_engine():
    """Las conexiones del pool quedan atadas al loop de cada test."""
    yield
    await async_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client():
    """AsyncClient enlazado a la app sin overrides adicionales."""
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_db_session() -> AsyncSession:
    """AsyncSession para pruebas directas de servicios y del store."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def admin_user() -> dict[str, Any]:
    """Crea y confirma un usuario activo con contraseña conocida."""
    async with AsyncSessionLocal() as session:
        user = await user_service.create_user(
            session,
            UserCreate(email=f"admin-{uuid.uuid4().hex[:8]}@example.com", name="Test Admin", password=ADMIN_PASSWORD),
        )
        await commit_async(session)
    return user


@pytest_asyncio.fixture(scope="function")
async def admin_token(client: httpx.AsyncClient, admin_user: dict[str, Any]) -> str:
    """Devuelve un access token válido para el admin."""
    resp = await client.post(
        "/api/v1/auth/login",
        data={"username": admin_user["email"], "password": ADMIN_PASSWORD},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest.fixture(scope="function")
def auth_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}
