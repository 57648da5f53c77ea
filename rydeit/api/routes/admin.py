"""
Admin / operations endpoints
============================

GET   /api/v1/admin/bookings?filter=...                -- bookings by operational view
PATCH /api/v1/admin/bookings/{readable_id}/status     -- confirm / reject / dispatch / receive
PATCH /api/v1/admin/bikes/{bike_id}/status            -- fleet status
POST  /api/v1/admin/bikes/{bike_id}/maintenance       -- log a service record
GET   /api/v1/admin/bikes/{bike_id}/maintenance       -- service history
GET   /api/v1/admin/health                            -- simple health check
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rydeit.api.dependencies import Clock, get_clock, get_db
from rydeit.api.middleware import limiter
from rydeit.api.routes.bookings import apply_lifecycle
from rydeit.api.routes.quotes import load_bike
from rydeit.api.schemas import (
    BikeResponse,
    BikeStatusUpdateRequest,
    BookingResponse,
    HealthResponse,
    MaintenanceCreateRequest,
    MaintenanceResponse,
    StatusUpdateRequest,
)
from rydeit.config import settings
from rydeit.domain.entities import Booking
from rydeit.domain.enums import BookingFilter, BookingStatus
from rydeit.infrastructure.repositories import (
    BookingRepository,
    MaintenanceRepository,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/bookings",
    response_model=list[BookingResponse],
    summary="List bookings for an operational view",
    description=(
        "pending = awaiting payment verification, running = ongoing, "
        "overdue = ongoing past the return time."
    ),
)
@limiter.limit(settings.rate_limit)
async def list_bookings(
    request: Request,
    filter: BookingFilter = BookingFilter.ALL,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return await BookingRepository(db).list_bookings(filter, now=clock())


@router.patch(
    "/bookings/{readable_id}/status",
    response_model=BookingResponse,
    summary="Move a booking through its lifecycle",
)
@limiter.limit(settings.rate_limit)
async def update_booking_status(
    request: Request,
    readable_id: str,
    body: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    def _apply(booking: Booking) -> None:
        if body.status == BookingStatus.PENDING_PAYMENT:
            booking.reject_payment()
        else:
            booking.transition_to(body.status)
        if body.status == BookingStatus.ONGOING:
            booking.start_timestamp = clock()
        elif body.status == BookingStatus.COMPLETED:
            booking.end_timestamp = clock()
        if body.reason:
            booking.admin_notes = body.reason

    return await apply_lifecycle(db, readable_id, _apply)


@router.patch(
    "/bikes/{bike_id}/status",
    response_model=BikeResponse,
    summary="Set a bike's fleet status",
)
@limiter.limit(settings.rate_limit)
async def update_bike_status(
    request: Request,
    bike_id: int,
    body: BikeStatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    bike = await load_bike(db, bike_id)
    logger.info("Bike %d: %s -> %s", bike.id, bike.status.value, body.status.value)
    bike.status = body.status
    await db.flush()
    return bike


@router.post(
    "/bikes/{bike_id}/maintenance",
    status_code=201,
    response_model=MaintenanceResponse,
    summary="Log a maintenance record",
)
@limiter.limit(settings.rate_limit)
async def log_maintenance(
    request: Request,
    bike_id: int,
    body: MaintenanceCreateRequest,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    bike = await load_bike(db, bike_id)
    entry = await MaintenanceRepository(db).create(
        bike_id=bike.id,
        description=body.description,
        cost=Decimal(str(body.cost)),
        log_date=body.log_date or clock().date(),
        odometer_reading=body.odometer_reading,
    )
    logger.info("Maintenance logged for bike %d (cost=%.2f)", bike.id, body.cost)
    return entry


@router.get(
    "/bikes/{bike_id}/maintenance",
    response_model=list[MaintenanceResponse],
    summary="Maintenance history for a bike",
)
@limiter.limit(settings.rate_limit)
async def list_maintenance(
    request: Request,
    bike_id: int,
    db: AsyncSession = Depends(get_db),
):
    bike = await load_bike(db, bike_id)
    return await MaintenanceRepository(db).list_for_bike(bike.id)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
