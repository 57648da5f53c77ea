"""
Fleet endpoints
===============

GET /api/v1/bikes           -- list the fleet, optionally filtered
GET /api/v1/bikes/{bike_id} -- a single bike
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rydeit.api.dependencies import get_db
from rydeit.api.middleware import limiter
from rydeit.api.routes.quotes import load_bike
from rydeit.api.schemas import BikeResponse
from rydeit.config import settings
from rydeit.domain.enums import BikeCategory, BikeStatus
from rydeit.infrastructure.repositories import BikeRepository

router = APIRouter(prefix="/bikes", tags=["bikes"])


@router.get("", response_model=list[BikeResponse], summary="List the fleet")
@limiter.limit(settings.rate_limit)
async def list_bikes(
    request: Request,
    category: Optional[BikeCategory] = None,
    status: Optional[BikeStatus] = None,
    db: AsyncSession = Depends(get_db),
):
    return await BikeRepository(db).list_bikes(category=category, status=status)


@router.get("/{bike_id}", response_model=BikeResponse, summary="Get a bike")
@limiter.limit(settings.rate_limit)
async def get_bike(
    request: Request,
    bike_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await load_bike(db, bike_id)
