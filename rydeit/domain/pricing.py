"""
Tiered Rental Pricing Engine
============================

Converts a bike's daily rate and a pickup/drop window into a deterministic
price breakdown.  Pure: no I/O, no clock reads, no shared state.

Formula
-------
r_eff = Daily_Rate + (Outstation ? Outstation_Surcharge : 0)

* **Reference price**: r_eff x (calendar days spanned, inclusive)
* **Base price** (tiered on duration):

  ========================  ====================
  duration                  price
  ========================  ====================
  <= 6 h                    0.8 x r_eff
  <= 12 h                   1.0 x r_eff
  <= 24 h, same date        1.0 x r_eff
  <= 24 h, different date   1.4 x r_eff
  > 24 h                    1.4 x r_eff + blocks
  ========================  ====================

* **Blocks** meter every hour past the first 24 in half-day granularity:
  morning 08-14 and afternoon 14-20 cost 0.4 x r_eff, night 20-08 costs
  0.2 x r_eff.  A partially used block is charged half when less than half
  its nominal length was used, otherwise in full.

* **Payable** = floor(chosen rent + early/late fees + delivery fees), where
  the chosen rent is the base price only if the customer keeps the discount
  and the base price actually undercuts the reference price.

Complexity: O(B) where B = number of blocks past the first day (<= 3/day).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from decimal import ROUND_FLOOR, Decimal
from typing import Union

from .enums import HandoverMethod

Number = Union[Decimal, int, float, str]

HOUR = Decimal(3600)

SHORT_HOURS = Decimal(6)
HALF_DAY_HOURS = Decimal(12)
DAY_HOURS = Decimal(24)

SHORT_MULTIPLIER = Decimal("0.8")
DAY_MULTIPLIER = Decimal("1.0")
EXTENDED_MULTIPLIER = Decimal("1.4")

COMFORT_START = 8
COMFORT_END = 20


class PricingError(ValueError):
    """Base class for refusals to price a request."""


class InvalidDurationError(PricingError):
    """Raised when the drop time is not strictly after the pickup time."""


class InvalidRateError(PricingError):
    """Raised when the fleet catalog supplies a non-positive daily rate."""


# ── Value objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class RentalQuoteRequest:
    daily_rate: Decimal
    pickup_at: datetime
    drop_at: datetime
    is_outstation: bool = False
    pickup_method: HandoverMethod = HandoverMethod.GARAGE
    drop_method: HandoverMethod = HandoverMethod.GARAGE
    apply_discount: bool = True


@dataclass(frozen=True)
class RentalQuoteResult:
    effective_rate: Decimal
    total_hours: Decimal
    reference_price: Decimal
    base_price: Decimal
    discount_amount: Decimal
    discount_percent: int
    has_discount: bool
    chosen_rent: Decimal
    is_early_pickup: bool
    is_late_pickup: bool
    is_early_drop: bool
    is_late_drop: bool
    early_late_pickup_fee: Decimal
    early_late_drop_fee: Decimal
    delivery_fee: Decimal
    home_pickup_fee: Decimal
    final_payable: int
    advance: int
    security: Decimal

    @property
    def base_price_display(self) -> int:
        return _floor(self.base_price)

    @property
    def discount_display(self) -> int:
        return _floor(self.discount_amount)


@dataclass(frozen=True)
class Block:
    name: str
    multiplier: Decimal
    nominal_hours: Decimal

    def charge(self, r_eff: Decimal, used_hours: Decimal) -> Decimal:
        price = self.multiplier * r_eff
        if used_hours < self.nominal_hours / 2:
            return price / 2
        return price


MORNING = Block("morning", Decimal("0.4"), Decimal(6))
AFTERNOON = Block("afternoon", Decimal("0.4"), Decimal(6))
NIGHT = Block("night", Decimal("0.2"), Decimal(12))


# ── Tiered duration pricing ───────────────────────────────────────────


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Exact fractional hours from *start* to *end*."""
    delta = end - start
    seconds = (
        Decimal(delta.days) * 86400
        + delta.seconds
        + Decimal(delta.microseconds) / 1_000_000
    )
    return seconds / HOUR


def block_at(cursor: datetime) -> tuple[Block, datetime]:
    """Return the block *cursor* falls into and that block's end."""
    if COMFORT_START <= cursor.hour < 14:
        return MORNING, cursor.replace(hour=14, minute=0, second=0, microsecond=0)
    if 14 <= cursor.hour < COMFORT_END:
        return AFTERNOON, cursor.replace(hour=20, minute=0, second=0, microsecond=0)
    end = cursor.replace(hour=8, minute=0, second=0, microsecond=0)
    if cursor.hour >= COMFORT_END:
        end += timedelta(days=1)
    return NIGHT, end


def block_charges(r_eff: Decimal, start: datetime, end: datetime) -> Decimal:
    """Walk the daily blocks from *start* to *end* and sum their charges."""
    total = Decimal(0)
    cursor = start
    while cursor < end:
        block, block_end = block_at(cursor)
        used = hours_between(cursor, min(block_end, end))
        total += block.charge(r_eff, used)
        cursor = block_end
    return total


def tiered_base_price(
    r_eff: Decimal, pickup_at: datetime, drop_at: datetime
) -> Decimal:
    total_hours = hours_between(pickup_at, drop_at)
    if total_hours <= SHORT_HOURS:
        return SHORT_MULTIPLIER * r_eff
    if total_hours <= HALF_DAY_HOURS:
        return DAY_MULTIPLIER * r_eff
    if total_hours <= DAY_HOURS:
        if pickup_at.date() == drop_at.date():
            return DAY_MULTIPLIER * r_eff
        return EXTENDED_MULTIPLIER * r_eff
    extra_start = pickup_at + timedelta(hours=24)
    return EXTENDED_MULTIPLIER * r_eff + block_charges(r_eff, extra_start, drop_at)


def reference_price(r_eff: Decimal, pickup_at: datetime, drop_at: datetime) -> Decimal:
    """Flat full-day price, counting the final calendar day."""
    day_diff = max(0, (drop_at.date() - pickup_at.date()).days)
    return r_eff * (day_diff + 1)


# ── Operating-window surcharges ───────────────────────────────────────


def is_early(moment: time) -> bool:
    return moment.hour < COMFORT_START


def is_late(moment: time) -> bool:
    return moment.hour > COMFORT_END or (
        moment.hour == COMFORT_END and moment.minute > 0
    )


# ── Helpers ───────────────────────────────────────────────────────────


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def _round_half_up(value: Decimal) -> int:
    # Ties go towards +infinity.
    return _floor(value + Decimal("0.5"))


# ── Engine facade ─────────────────────────────────────────────────────


class PricingEngine:
    """High-level API used by the quote and booking endpoints."""

    def __init__(
        self,
        outstation_surcharge: Number = Decimal("99"),
        early_late_fee: Number = Decimal("99"),
        delivery_fee: Number = Decimal("199"),
        security_deposit: Number = Decimal("1000"),
        advance_ratio: Number = Decimal("0.4"),
    ):
        self.outstation_surcharge = _to_decimal(outstation_surcharge)
        self.early_late_fee = _to_decimal(early_late_fee)
        self.delivery_fee = _to_decimal(delivery_fee)
        self.security_deposit = _to_decimal(security_deposit)
        self.advance_ratio = _to_decimal(advance_ratio)

    def effective_rate(self, daily_rate: Number, is_outstation: bool) -> Decimal:
        rate = _to_decimal(daily_rate)
        if rate <= 0:
            raise InvalidRateError(f"Daily rate must be positive, got {rate}")
        return rate + (self.outstation_surcharge if is_outstation else 0)

    def handover_fee(self, method: HandoverMethod) -> Decimal:
        return self.delivery_fee if method == HandoverMethod.HOME else Decimal(0)

    def quote(self, req: RentalQuoteRequest) -> RentalQuoteResult:
        if req.drop_at <= req.pickup_at:
            raise InvalidDurationError(
                f"Drop time {req.drop_at.isoformat()} is not after "
                f"pickup time {req.pickup_at.isoformat()}"
            )
        r_eff = self.effective_rate(req.daily_rate, req.is_outstation)

        reference = reference_price(r_eff, req.pickup_at, req.drop_at)
        base = tiered_base_price(r_eff, req.pickup_at, req.drop_at)

        discount = reference - base
        has_discount = discount > 0
        if has_discount:
            percent = _round_half_up(discount / reference * 100) if reference else 0
        else:
            discount, percent = Decimal(0), 0
        chosen = base if req.apply_discount and has_discount else reference

        pickup_time, drop_time = req.pickup_at.time(), req.drop_at.time()
        early_pickup, late_pickup = is_early(pickup_time), is_late(pickup_time)
        early_drop, late_drop = is_early(drop_time), is_late(drop_time)
        pickup_fee = self.early_late_fee if early_pickup or late_pickup else Decimal(0)
        drop_fee = self.early_late_fee if early_drop or late_drop else Decimal(0)

        delivery_fee = self.handover_fee(req.pickup_method)
        home_pickup_fee = self.handover_fee(req.drop_method)

        final_payable = _floor(
            chosen + pickup_fee + drop_fee + delivery_fee + home_pickup_fee
        )
        return RentalQuoteResult(
            effective_rate=r_eff,
            total_hours=hours_between(req.pickup_at, req.drop_at),
            reference_price=reference,
            base_price=base,
            discount_amount=discount,
            discount_percent=percent,
            has_discount=has_discount,
            chosen_rent=chosen,
            is_early_pickup=early_pickup,
            is_late_pickup=late_pickup,
            is_early_drop=early_drop,
            is_late_drop=late_drop,
            early_late_pickup_fee=pickup_fee,
            early_late_drop_fee=drop_fee,
            delivery_fee=delivery_fee,
            home_pickup_fee=home_pickup_fee,
            final_payable=final_payable,
            advance=_floor(final_payable * self.advance_ratio),
            security=self.security_deposit,
        )


_default_engine = PricingEngine()


def compute_quote(
    req: RentalQuoteRequest, engine: PricingEngine | None = None
) -> RentalQuoteResult:
    return (engine or _default_engine).quote(req)
