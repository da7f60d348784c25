import os

# Settings are read at import time; point the app at the test database first.
os.environ.setdefault("DATABASE_URL", os.getenv("DATABASE_URL_TEST") or "sqlite+aiosqlite://")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("INTERNAL_ADMIN_KEY", "test-internal-key")
os.environ.setdefault("API_KEY_PEPPER", "test-pepper")

import pytest
import httpx

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Import Base + all models so metadata is complete
import app.models  # noqa: F401
from app.models.base import Base

from app.main import app
from app.core.db import get_db
from app.services.storage import LocalObjectStore, get_object_store

from tests.fixtures_seed import *  # noqa: F401,F403


def _test_db_url() -> str:
    return os.getenv("DATABASE_URL_TEST") or "sqlite+aiosqlite://"


@pytest.fixture
async def async_engine():
    url = _test_db_url()
    if url.startswith("sqlite"):
        # one shared in-memory database for every connection of the test
        engine = create_async_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    else:
        engine = create_async_engine(url, pool_pre_ping=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    """
    Fresh schema per test. Endpoints commit for real, so isolation comes
    from recreating the tables rather than from an outer rollback.
    """
    session_factory = async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession, tmp_path):
    """
    HTTP client that uses the test DB session via dependency override.
    """
    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_object_store] = lambda: LocalObjectStore(
        str(tmp_path / "media"), "http://test/media"
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
