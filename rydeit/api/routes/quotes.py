"""
Quote endpoint
==============

POST /api/v1/quotes -- price a bike for a pickup/drop window

Quotes are recomputed on every call and never stored; a booking snapshots
the quote at submission time.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rydeit.api.dependencies import get_db, get_pricing_engine
from rydeit.api.middleware import limiter
from rydeit.api.schemas import QuoteCreateRequest, QuoteResponse
from rydeit.config import settings
from rydeit.domain.pricing import PricingEngine, RentalQuoteRequest, RentalQuoteResult
from rydeit.infrastructure.models import BikeModel
from rydeit.infrastructure.repositories import BikeRepository

router = APIRouter(prefix="/quotes", tags=["quotes"])


async def load_bike(db: AsyncSession, bike_id: int) -> BikeModel:
    bike = await BikeRepository(db).get_by_id(bike_id)
    if not bike:
        raise HTTPException(status_code=404, detail="Bike not found")
    return bike


def quote_for(
    engine: PricingEngine, bike: BikeModel, body: QuoteCreateRequest
) -> RentalQuoteResult:
    return engine.quote(
        RentalQuoteRequest(
            daily_rate=bike.daily_rate,
            pickup_at=body.pickup_at,
            drop_at=body.drop_at,
            is_outstation=body.outstation,
            pickup_method=body.pickup_method,
            drop_method=body.drop_method,
            apply_discount=body.apply_discount,
        )
    )


@router.post(
    "",
    response_model=QuoteResponse,
    summary="Quote a rental",
    responses={422: {"description": "Drop time is not after pickup time"}},
)
@limiter.limit(settings.rate_limit)
async def create_quote(
    request: Request,
    body: QuoteCreateRequest,
    db: AsyncSession = Depends(get_db),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    bike = await load_bike(db, body.bike_id)
    return QuoteResponse.from_result(quote_for(engine, bike, body))
