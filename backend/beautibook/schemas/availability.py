# backend/beautibook/schemas/availability.py
"""Response DTOs for the availability endpoint."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from ..services.availability_service import AvailabilityResult, SlotAvailability, SlotCheck
from ._strict_base import StrictModel


class SlotResponse(StrictModel):
    slot_datetime: datetime = Field(..., alias="datetime")
    available: bool
    pst_time: str = Field(..., description="Slot start on the business clock, e.g. 9:00 AM")
    reason: Optional[str] = None

    @classmethod
    def from_slot(cls, slot: SlotAvailability) -> "SlotResponse":
        return cls(
            slot_datetime=slot.start,
            available=slot.available,
            pst_time=slot.local.display,
            reason=slot.reason,
        )


class AvailabilityResponse(StrictModel):
    success: bool = True
    slots: List[SlotResponse]
    total_slots: int
    available_slots: int
    slot_date: date = Field(..., alias="date")
    staff_id: str
    service_id: str
    staff_name: str
    service_name: str
    service_duration: int
    message: Optional[str] = None

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityResponse":
        return cls(
            slots=[SlotResponse.from_slot(slot) for slot in result.slots],
            total_slots=result.total_slots,
            available_slots=result.available_slots,
            slot_date=result.date,
            staff_id=result.staff_id,
            service_id=result.service_id,
            staff_name=result.staff_name,
            service_name=result.service_name,
            service_duration=result.service_duration,
            message=result.message,
        )


class ValidatedSlot(StrictModel):
    staff_id: str
    service_id: str
    slot_datetime: datetime = Field(..., alias="datetime")


class SlotValidationResponse(StrictModel):
    success: bool = True
    available: bool
    reason: Optional[str] = None
    slot: ValidatedSlot

    @classmethod
    def from_check(cls, check: SlotCheck, staff_id: str, service_id: str) -> "SlotValidationResponse":
        return cls(
            available=check.available,
            reason=check.reason,
            slot=ValidatedSlot(staff_id=staff_id, service_id=service_id, slot_datetime=check.start),
        )
