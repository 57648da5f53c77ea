"""FastAPI dependency injection helpers."""

from datetime import datetime
from functools import lru_cache
from typing import Callable
from zoneinfo import ZoneInfo

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from rydeit.config import settings
from rydeit.domain.pricing import PricingEngine
from rydeit.infrastructure.database import async_session_factory

Clock = Callable[[], datetime]


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@lru_cache
def _lock_pool() -> aioredis.ConnectionPool:
    return aioredis.ConnectionPool.from_url(settings.redis_url, decode_responses=True)


async def get_lock_client() -> aioredis.Redis:
    """Redis client for booking locks; all clients share one pool."""
    return aioredis.Redis(connection_pool=_lock_pool())


def get_clock() -> Clock:
    """Naive wall-clock "now" in the operator timezone."""
    tz = ZoneInfo(settings.timezone)
    return lambda: datetime.now(tz).replace(tzinfo=None)


def get_pricing_engine() -> PricingEngine:
    return PricingEngine(
        outstation_surcharge=settings.outstation_daily_surcharge,
        early_late_fee=settings.early_late_fee,
        delivery_fee=settings.delivery_pickup_fee,
        security_deposit=settings.security_deposit,
        advance_ratio=settings.advance_ratio,
    )
