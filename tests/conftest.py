"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The production models are created directly
on SQLite; Redis is replaced by an ``AsyncMock`` and the wall clock is
pinned to ``NOW``.
"""

from datetime import datetime
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from rydeit.domain.catalog import FLEET
from rydeit.infrastructure.database import Base
from rydeit.infrastructure.models import BikeModel


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

# Pinned operator wall clock for lifecycle timestamps and overdue checks
NOW = datetime(2024, 1, 10, 12, 0)


def make_lock_client(acquired: bool = True) -> AsyncMock:
    client = AsyncMock()
    client.set = AsyncMock(return_value=acquired)
    client.eval = AsyncMock(return_value=1)
    return client


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def lock_client() -> AsyncMock:
    return make_lock_client()


@pytest_asyncio.fixture
async def client(lock_client: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by SQLite, a mocked lock client and a fixed clock."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Seed the fleet
    async with TestSessionFactory() as session:
        for bike in FLEET:
            session.add(
                BikeModel(
                    id=bike.id,
                    name=bike.name,
                    description=bike.description,
                    image_url=bike.image_url,
                    color=bike.color,
                    category=bike.category,
                    daily_rate=bike.daily_rate,
                    status=bike.status,
                )
            )
        await session.commit()

    async def _test_db():
        async with TestSessionFactory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _test_lock_client():
        return lock_client

    from rydeit.api.app import create_app
    from rydeit.api.dependencies import get_clock, get_db, get_lock_client
    from rydeit.api.middleware import limiter

    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_lock_client] = _test_lock_client
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    limiter_was_enabled = limiter.enabled
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    limiter.enabled = limiter_was_enabled
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
