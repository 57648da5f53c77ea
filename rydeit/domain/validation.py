"""
Booking submission preconditions.

These run before a booking is persisted; the pricing engine itself only
refuses impossible durations and rates.
"""

from __future__ import annotations

from datetime import datetime, time

from .enums import HandoverMethod


class BookingValidationError(ValueError):
    """Raised when a booking form fails a submission precondition."""


def parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def within_operating_window(moment: time, open_at: time, close_at: time) -> bool:
    """Both ends inclusive; seconds are ignored like the HH:MM form input."""
    hhmm = moment.replace(second=0, microsecond=0)
    return open_at <= hhmm <= close_at


def validate_submission(
    *,
    pickup_at: datetime,
    drop_at: datetime,
    pickup_method: HandoverMethod,
    drop_method: HandoverMethod,
    address: str | None,
    accepted_terms: bool,
    operating_open: time,
    operating_close: time,
) -> None:
    if not accepted_terms:
        raise BookingValidationError("Please accept the terms and conditions")

    for moment in (pickup_at.time(), drop_at.time()):
        if not within_operating_window(moment, operating_open, operating_close):
            raise BookingValidationError(
                f"We only operate between {operating_open:%H:%M} and "
                f"{operating_close:%H:%M}"
            )

    if drop_at <= pickup_at:
        raise BookingValidationError("Drop cannot be before pickup")

    needs_address = HandoverMethod.HOME in (pickup_method, drop_method)
    if needs_address and not (address or "").strip():
        raise BookingValidationError("Please enter your delivery/pickup address")
