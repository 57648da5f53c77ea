"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rydeit.domain.enums import (
    BikeCategory,
    BikeStatus,
    BookingStatus,
    HandoverMethod,
    PaymentMethod,
)
from rydeit.domain.pricing import RentalQuoteResult


# ── Requests ──────────────────────────────────────────────────────────


class QuoteCreateRequest(BaseModel):
    bike_id: int
    pickup_date: date
    pickup_time: time
    return_date: date
    return_time: time
    outstation: bool = False
    pickup_method: HandoverMethod = HandoverMethod.GARAGE
    drop_method: HandoverMethod = HandoverMethod.GARAGE
    apply_discount: bool = True

    @field_validator("pickup_time", "return_time")
    @classmethod
    def wall_clock_time(cls, value: time) -> time:
        # Times are operator wall-clock, the same frame as the dates
        if value.tzinfo is not None:
            raise ValueError("Time must not carry a UTC offset")
        return value

    @property
    def pickup_at(self) -> datetime:
        return datetime.combine(self.pickup_date, self.pickup_time)

    @property
    def drop_at(self) -> datetime:
        return datetime.combine(self.return_date, self.return_time)


class BookingCreateRequest(QuoteCreateRequest):
    readable_id: Optional[str] = Field(
        None,
        pattern=r"^RD-\d{6}$",
        description="Client-held booking ID; resubmitting with it updates the same booking.",
    )
    user_id: Optional[str] = Field(None, max_length=64)
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_phone: str = Field(..., min_length=5, max_length=20)
    customer_email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    accepted_terms: bool = False


class PaymentReportRequest(BaseModel):
    method: PaymentMethod = PaymentMethod.UPI


class StatusUpdateRequest(BaseModel):
    status: BookingStatus
    reason: Optional[str] = Field(None, max_length=500)


class BikeStatusUpdateRequest(BaseModel):
    status: BikeStatus


class MaintenanceCreateRequest(BaseModel):
    description: str = Field(..., min_length=1)
    cost: float = Field(0, ge=0)
    odometer_reading: Optional[float] = Field(None, ge=0)
    log_date: Optional[date] = None


# ── Responses ─────────────────────────────────────────────────────────


class QuoteResponse(BaseModel):
    effective_rate: float
    total_hours: float
    reference_price: float
    base_price: int
    discount_amount: int
    discount_percent: int
    has_discount: bool
    chosen_rent: float
    is_early_pickup: bool
    is_late_pickup: bool
    is_early_drop: bool
    is_late_drop: bool
    early_late_pickup_fee: float
    early_late_drop_fee: float
    delivery_fee: float
    home_pickup_fee: float
    final_payable: int
    advance: int
    security: float

    @classmethod
    def from_result(cls, result: RentalQuoteResult) -> "QuoteResponse":
        return cls(
            effective_rate=result.effective_rate,
            total_hours=result.total_hours,
            reference_price=result.reference_price,
            base_price=result.base_price_display,
            discount_amount=result.discount_display,
            discount_percent=result.discount_percent,
            has_discount=result.has_discount,
            chosen_rent=result.chosen_rent,
            is_early_pickup=result.is_early_pickup,
            is_late_pickup=result.is_late_pickup,
            is_early_drop=result.is_early_drop,
            is_late_drop=result.is_late_drop,
            early_late_pickup_fee=result.early_late_pickup_fee,
            early_late_drop_fee=result.early_late_drop_fee,
            delivery_fee=result.delivery_fee,
            home_pickup_fee=result.home_pickup_fee,
            final_payable=result.final_payable,
            advance=result.advance,
            security=result.security,
        )


class BikeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    color: Optional[str] = None
    category: BikeCategory
    daily_rate: float
    status: BikeStatus

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    readable_id: str
    user_id: Optional[str] = None
    bike_id: int
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    pickup_date: date
    pickup_time: time
    return_date: date
    return_time: time
    pickup_method: HandoverMethod
    drop_method: HandoverMethod
    is_outstation: bool
    address: Optional[str] = None
    total_rent: int
    advance_amount: int
    security_deposit: int
    status: BookingStatus
    payment_method: Optional[PaymentMethod] = None
    agreement_signed_at: Optional[datetime] = None
    start_timestamp: Optional[datetime] = None
    end_timestamp: Optional[datetime] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MaintenanceResponse(BaseModel):
    id: int
    bike_id: int
    description: str
    cost: float
    log_date: date
    odometer_reading: Optional[float] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
