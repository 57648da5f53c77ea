"""
Async SQLAlchemy engine and session factory.

``asyncpg`` in production; tests build their own engine on aiosqlite and
reuse ``Base.metadata``.  Pool sizing comes from settings.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from rydeit.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    pool_pre_ping=True,
)

# Booking submission serialises rows after committing under the lock
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for bikes, bookings and maintenance logs."""
