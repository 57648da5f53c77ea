"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BikeModel, BookingModel, MaintenanceLogModel
from rydeit.domain.entities import Bike, Booking
from rydeit.domain.enums import (
    BikeCategory,
    BikeStatus,
    BookingFilter,
    BookingStatus,
)

_FILTER_STATUS = {
    BookingFilter.PENDING: BookingStatus.VERIFYING_PAYMENT,
    BookingFilter.RUNNING: BookingStatus.ONGOING,
    BookingFilter.OVERDUE: BookingStatus.ONGOING,
    BookingFilter.COMPLETED: BookingStatus.COMPLETED,
}

# Lifecycle columns copied between the ORM row and the domain entity
_LIFECYCLE_FIELDS = (
    "status",
    "payment_method",
    "agreement_signed_at",
    "start_timestamp",
    "end_timestamp",
    "admin_notes",
)


def to_entity(row: BookingModel) -> Booking:
    return Booking(
        readable_id=row.readable_id,
        bike_id=row.bike_id,
        pickup_date=row.pickup_date,
        pickup_time=row.pickup_time,
        return_date=row.return_date,
        return_time=row.return_time,
        pickup_method=row.pickup_method,
        drop_method=row.drop_method,
        **{name: getattr(row, name) for name in _LIFECYCLE_FIELDS},
    )


def to_bike(row: BikeModel) -> Bike:
    return Bike(
        id=row.id,
        name=row.name,
        category=row.category,
        daily_rate=row.daily_rate,
        description=row.description or "",
        image_url=row.image_url or "",
        color=row.color or "black",
        status=row.status,
    )


def apply_entity(row: BookingModel, booking: Booking) -> BookingModel:
    for name in _LIFECYCLE_FIELDS:
        setattr(row, name, getattr(booking, name))
    return row


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_readable_id(self, readable_id: str) -> Optional[BookingModel]:
        result = await self.session.execute(
            select(BookingModel).where(BookingModel.readable_id == readable_id)
        )
        return result.scalar_one_or_none()

    async def upsert_by_readable_id(
        self, readable_id: str, **fields: Any
    ) -> tuple[BookingModel, bool]:
        """Insert or overwrite the booking keyed by *readable_id*.

        Returns ``(row, created)``.  Callers serialise concurrent upserts for
        the same ID; the unique constraint is the last line of protection.
        """
        booking = await self.get_by_readable_id(readable_id)
        created = booking is None
        if created:
            booking = BookingModel(readable_id=readable_id, **fields)
            self.session.add(booking)
        else:
            for name, value in fields.items():
                setattr(booking, name, value)
        await self.session.flush()
        return booking, created

    async def list_bookings(
        self, booking_filter: BookingFilter = BookingFilter.ALL, now: datetime | None = None
    ) -> list[BookingModel]:
        query = select(BookingModel).order_by(
            BookingModel.created_at.desc(), BookingModel.id.desc()
        )
        status = _FILTER_STATUS.get(booking_filter)
        if status is not None:
            query = query.where(BookingModel.status == status)
        result = await self.session.execute(query)
        rows = list(result.scalars().all())
        if booking_filter == BookingFilter.OVERDUE:
            if now is None:
                raise ValueError("Overdue filter needs the current time")
            rows = [r for r in rows if to_entity(r).is_overdue(now)]
        return rows

    async def list_for_user(self, user_id: str) -> list[BookingModel]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc())
        )
        return list(result.scalars().all())


class BikeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, bike_id: int) -> Optional[BikeModel]:
        return await self.session.get(BikeModel, bike_id)

    async def list_bikes(
        self,
        category: BikeCategory | None = None,
        status: BikeStatus | None = None,
    ) -> list[BikeModel]:
        query = select(BikeModel).order_by(BikeModel.id)
        if category is not None:
            query = query.where(BikeModel.category == category)
        if status is not None:
            query = query.where(BikeModel.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())


class MaintenanceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        bike_id: int,
        description: str,
        cost,
        log_date: date,
        odometer_reading: float | None = None,
    ) -> MaintenanceLogModel:
        entry = MaintenanceLogModel(
            bike_id=bike_id,
            description=description,
            cost=cost,
            log_date=log_date,
            odometer_reading=odometer_reading,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_for_bike(self, bike_id: int) -> list[MaintenanceLogModel]:
        result = await self.session.execute(
            select(MaintenanceLogModel)
            .where(MaintenanceLogModel.bike_id == bike_id)
            .order_by(MaintenanceLogModel.log_date.desc(), MaintenanceLogModel.id.desc())
        )
        return list(result.scalars().all())
