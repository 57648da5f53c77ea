"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Booking``: enforces valid lifecycle transitions
  (pending_payment -> verifying_payment -> booking_confirmed -> ongoing ->
  completed | cancelled).
- ``Booking.start`` additionally requires a signed rental agreement.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from .enums import (
    BOOKING_TRANSITIONS,
    BikeCategory,
    BikeStatus,
    BookingStatus,
    HandoverMethod,
    PaymentMethod,
)

READABLE_ID_PREFIX = "RD-"


class InvalidStateTransition(Exception):
    """Raised when a booking status change violates the state machine."""


class AgreementNotSigned(InvalidStateTransition):
    """Raised when a ride is started before the agreement is signed."""


def generate_readable_id(rng: random.Random | None = None) -> str:
    """``RD-`` followed by six digits, e.g. ``RD-482913``."""
    rng = rng or random
    return f"{READABLE_ID_PREFIX}{rng.randint(100000, 999999)}"


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Bike:
    id: int
    name: str
    category: BikeCategory
    daily_rate: Decimal
    description: str = ""
    image_url: str = ""
    color: str = "black"
    status: BikeStatus = BikeStatus.AVAILABLE

    @property
    def is_bookable(self) -> bool:
        return self.status != BikeStatus.BOOKED


@dataclass
class Booking:
    readable_id: str = ""
    bike_id: int = 0
    pickup_date: Optional[date] = None
    pickup_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    pickup_method: HandoverMethod = HandoverMethod.GARAGE
    drop_method: HandoverMethod = HandoverMethod.GARAGE
    status: BookingStatus = BookingStatus.PENDING_PAYMENT
    payment_method: Optional[PaymentMethod] = None
    agreement_signed_at: Optional[datetime] = None
    start_timestamp: Optional[datetime] = None
    end_timestamp: Optional[datetime] = None
    admin_notes: Optional[str] = None

    @property
    def return_at(self) -> Optional[datetime]:
        if self.return_date is None or self.return_time is None:
            return None
        return datetime.combine(self.return_date, self.return_time)

    def transition_to(self, new_status: BookingStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = BOOKING_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status

    def report_payment(self, method: PaymentMethod) -> None:
        self.transition_to(BookingStatus.VERIFYING_PAYMENT)
        self.payment_method = method

    def reject_payment(self) -> None:
        """Send a verifying booking back to pending and forget the reported method."""
        self.transition_to(BookingStatus.PENDING_PAYMENT)
        self.payment_method = None

    def sign_agreement(self, now: datetime) -> None:
        if self.status != BookingStatus.BOOKING_CONFIRMED:
            raise InvalidStateTransition(
                f"Agreement can only be signed once confirmed, not {self.status.value}"
            )
        self.agreement_signed_at = now

    def start(self, now: datetime) -> None:
        if self.agreement_signed_at is None:
            raise AgreementNotSigned("Agreement must be signed before the ride starts")
        self.transition_to(BookingStatus.ONGOING)
        self.start_timestamp = now

    def finish(self, now: datetime) -> None:
        self.transition_to(BookingStatus.COMPLETED)
        self.end_timestamp = now

    def is_overdue(self, now: datetime) -> bool:
        return_at = self.return_at
        return (
            self.status == BookingStatus.ONGOING
            and return_at is not None
            and return_at < now
        )
