"""
Booking endpoints
=================

POST /api/v1/bookings                          -- submit (or resubmit) a booking
GET  /api/v1/bookings?user_id=...              -- a customer's bookings
GET  /api/v1/bookings/{readable_id}            -- booking status and price
POST /api/v1/bookings/{readable_id}/payment    -- customer reports payment
POST /api/v1/bookings/{readable_id}/agreement  -- sign the rental agreement
POST /api/v1/bookings/{readable_id}/start      -- start the ride
POST /api/v1/bookings/{readable_id}/finish     -- finish the ride
"""

import logging
from typing import Callable

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rydeit.api.dependencies import (
    Clock,
    get_clock,
    get_db,
    get_lock_client,
    get_pricing_engine,
)
from rydeit.api.middleware import limiter
from rydeit.api.routes.quotes import load_bike, quote_for
from rydeit.api.schemas import (
    BookingCreateRequest,
    BookingResponse,
    PaymentReportRequest,
)
from rydeit.config import settings
from rydeit.domain.entities import (
    Booking,
    InvalidStateTransition,
    generate_readable_id,
)
from rydeit.domain.enums import BookingStatus
from rydeit.domain.pricing import PricingEngine
from rydeit.domain.validation import parse_hhmm, validate_submission
from rydeit.infrastructure.locks import DistributedLock
from rydeit.infrastructure.models import BookingModel
from rydeit.infrastructure.repositories import (
    BookingRepository,
    apply_entity,
    to_bike,
    to_entity,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])

_ID_ATTEMPTS = 5


async def load_booking(db: AsyncSession, readable_id: str) -> BookingModel:
    booking = await BookingRepository(db).get_by_readable_id(readable_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


async def apply_lifecycle(
    db: AsyncSession, readable_id: str, action: Callable[[Booking], None]
) -> BookingModel:
    """Load the booking, run *action* on its entity, write the result back."""
    row = await load_booking(db, readable_id)
    booking = to_entity(row)
    previous = booking.status
    action(booking)
    apply_entity(row, booking)
    await db.flush()
    if booking.status != previous:
        logger.info(
            "Booking %s: %s -> %s", readable_id, previous.value, booking.status.value
        )
    return row


async def _fresh_readable_id(repo: BookingRepository) -> str:
    for _ in range(_ID_ATTEMPTS):
        candidate = generate_readable_id()
        if await repo.get_by_readable_id(candidate) is None:
            return candidate
    raise HTTPException(status_code=503, detail="Could not allocate a booking ID")


@router.post(
    "",
    status_code=201,
    response_model=BookingResponse,
    summary="Submit a booking",
    description=(
        "Validates the form, snapshots the quote and upserts the booking by "
        "its readable ID with status pending_payment.  Resubmitting with the "
        "same readable ID updates the same booking."
    ),
)
@limiter.limit(settings.rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    db: AsyncSession = Depends(get_db),
    lock_client: aioredis.Redis = Depends(get_lock_client),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    validate_submission(
        pickup_at=body.pickup_at,
        drop_at=body.drop_at,
        pickup_method=body.pickup_method,
        drop_method=body.drop_method,
        address=body.address,
        accepted_terms=body.accepted_terms,
        operating_open=parse_hhmm(settings.operating_open),
        operating_close=parse_hhmm(settings.operating_close),
    )

    bike = await load_bike(db, body.bike_id)
    if not to_bike(bike).is_bookable:
        raise HTTPException(status_code=409, detail="Bike is currently unavailable")
    quote = quote_for(engine, bike, body)

    repo = BookingRepository(db)
    readable_id = body.readable_id or await _fresh_readable_id(repo)

    lock = DistributedLock(
        lock_client,
        f"booking:{readable_id}",
        ttl_seconds=settings.booking_lock_ttl_seconds,
    )
    async with lock:
        existing = await repo.get_by_readable_id(readable_id)
        if existing and existing.status != BookingStatus.PENDING_PAYMENT:
            raise InvalidStateTransition(
                f"Booking {readable_id} is already {existing.status.value}"
            )
        try:
            booking, created = await repo.upsert_by_readable_id(
                readable_id,
                user_id=body.user_id,
                bike_id=bike.id,
                customer_name=body.customer_name,
                customer_phone=body.customer_phone,
                customer_email=body.customer_email,
                pickup_date=body.pickup_date,
                pickup_time=body.pickup_time,
                return_date=body.return_date,
                return_time=body.return_time,
                pickup_method=body.pickup_method,
                drop_method=body.drop_method,
                is_outstation=body.outstation,
                address=body.address,
                total_rent=quote.final_payable,
                advance_amount=quote.advance,
                security_deposit=int(quote.security),
                status=BookingStatus.PENDING_PAYMENT,
            )
            # Commit while holding the lock so the next holder sees this row
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            logger.warning("Booking %s lost an insert race: %s", readable_id, exc.orig)
            raise HTTPException(
                status_code=409, detail=f"Booking {readable_id} already exists"
            ) from exc

    logger.info(
        "Booking %s %s: bike=%d total=%d advance=%d",
        readable_id,
        "created" if created else "updated",
        bike.id,
        quote.final_payable,
        quote.advance,
    )
    return booking


@router.get(
    "", response_model=list[BookingResponse], summary="List a customer's bookings"
)
@limiter.limit(settings.rate_limit)
async def list_user_bookings(
    request: Request,
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await BookingRepository(db).list_for_user(user_id)


@router.get(
    "/{readable_id}", response_model=BookingResponse, summary="Get a booking"
)
@limiter.limit(settings.rate_limit)
async def get_booking(
    request: Request,
    readable_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await load_booking(db, readable_id)


@router.post(
    "/{readable_id}/payment",
    response_model=BookingResponse,
    summary="Report the advance as paid",
    description="Moves a pending_payment booking to verifying_payment.",
)
@limiter.limit(settings.rate_limit)
async def report_payment(
    request: Request,
    readable_id: str,
    body: PaymentReportRequest,
    db: AsyncSession = Depends(get_db),
):
    return await apply_lifecycle(
        db, readable_id, lambda booking: booking.report_payment(body.method)
    )


@router.post(
    "/{readable_id}/agreement",
    response_model=BookingResponse,
    summary="Sign the rental agreement",
)
@limiter.limit(settings.rate_limit)
async def sign_agreement(
    request: Request,
    readable_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return await apply_lifecycle(
        db, readable_id, lambda booking: booking.sign_agreement(clock())
    )


@router.post(
    "/{readable_id}/start",
    response_model=BookingResponse,
    summary="Start the ride",
    responses={409: {"description": "Not confirmed or agreement unsigned"}},
)
@limiter.limit(settings.rate_limit)
async def start_ride(
    request: Request,
    readable_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return await apply_lifecycle(
        db, readable_id, lambda booking: booking.start(clock())
    )


@router.post(
    "/{readable_id}/finish",
    response_model=BookingResponse,
    summary="Finish the ride",
)
@limiter.limit(settings.rate_limit)
async def finish_ride(
    request: Request,
    readable_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return await apply_lifecycle(
        db, readable_id, lambda booking: booking.finish(clock())
    )
