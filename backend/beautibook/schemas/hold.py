# backend/beautibook/schemas/hold.py
"""Request and response DTOs for the hold endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.booking import Booking
from ..models.customer import Customer
from ..models.hold import BookingHold
from ._strict_base import StrictModel, StrictRequestModel


class HoldCreateRequest(StrictRequestModel):
    session_id: str = Field(..., min_length=1, max_length=255)
    staff_id: str = Field(..., min_length=1, max_length=26)
    service_id: str = Field(..., min_length=1, max_length=26)
    slot_date_time: datetime = Field(..., description="ISO-8601 instant with UTC offset")


class RemainingTime(StrictModel):
    minutes: int
    seconds: int


class HoldResponse(StrictModel):
    id: str
    session_id: str
    staff_id: str
    service_id: str
    slot_date_time: datetime
    expires_at: datetime
    remaining_seconds: int
    remaining_time: RemainingTime

    @classmethod
    def from_hold(cls, hold: BookingHold, now: datetime) -> "HoldResponse":
        remaining = hold.remaining_seconds(now)
        return cls(
            id=hold.id,
            session_id=hold.session_id,
            staff_id=hold.staff_id,
            service_id=hold.service_id,
            slot_date_time=hold.slot_datetime,
            expires_at=hold.expires_at,
            remaining_seconds=remaining,
            remaining_time=RemainingTime(minutes=remaining // 60, seconds=remaining % 60),
        )


class HoldCreateResponse(StrictModel):
    success: bool = True
    message: str = "Hold created successfully"
    hold: HoldResponse


class HoldReleaseResponse(StrictModel):
    success: bool = True
    message: str = "Hold released successfully"
    hold_id: str


class SessionHoldResponse(StrictModel):
    success: bool = True
    has_active_hold: bool
    hold: Optional[HoldResponse] = None
    expired: Optional[bool] = None
    message: Optional[str] = None


class HoldConvertRequest(StrictRequestModel):
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_phone: str = Field(..., min_length=10, max_length=32)
    customer_email: Optional[str] = Field(default=None, max_length=255)
    marketing_consent: bool = False


class BookingSummary(BaseModel):
    """Booking echo on conversion; keys are the booking column names."""

    id: str
    staff_id: str
    service_id: str
    slot_datetime: datetime
    customer_name: str
    customer_phone: str
    final_price: int
    created_at: datetime

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingSummary":
        return cls(
            id=booking.id,
            staff_id=booking.staff_id,
            service_id=booking.service_id,
            slot_datetime=booking.slot_datetime,
            customer_name=booking.customer_name,
            customer_phone=booking.customer_phone,
            final_price=booking.final_price,
            created_at=booking.created_at,
        )


class CustomerSummary(StrictModel):
    id: str
    name: str
    phone: str
    email: Optional[str] = None
    is_returning: bool
    total_bookings: int
    total_spent: int
    marketing_consent: bool

    @classmethod
    def from_customer(cls, customer: Customer, is_returning: bool) -> "CustomerSummary":
        return cls(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            is_returning=is_returning,
            total_bookings=customer.total_bookings,
            total_spent=customer.total_spent,
            marketing_consent=customer.marketing_consent,
        )


class HoldConvertResponse(StrictModel):
    success: bool = True
    message: str = "Booking confirmed successfully"
    booking: BookingSummary
    customer: CustomerSummary
