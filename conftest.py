"""Shared pytest fixtures for SalesPulse tests."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.main import app


@pytest.fixture
async def client():
    """Create async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def db_engine():
    """Create tables on the configured database and drop them afterwards.

    Requires PostgreSQL to be running; only used by tests marked integration.
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session maker bound to the integration test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
