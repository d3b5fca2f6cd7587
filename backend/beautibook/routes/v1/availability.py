# backend/beautibook/routes/v1/availability.py
"""
Slot availability routes - API v1

Endpoints:
    GET /?staffId=&serviceId=&date= - Slots for a staff member, service and date
    GET /validate?staffId=&serviceId=&datetime= - Re-check one start time before holding it
"""

import asyncio
from datetime import date, datetime
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_availability_service
from ...core.exceptions import DomainException
from ...schemas.availability import AvailabilityResponse, SlotValidationResponse
from ...services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()


@router.get("", response_model=AvailabilityResponse, response_model_exclude_none=True)
async def get_availability(
    staff_id: str = Query(..., alias="staffId", min_length=1),
    service_id: str = Query(..., alias="serviceId", min_length=1),
    target_date: date = Query(..., alias="date", description="Business-calendar date, YYYY-MM-DD"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    """Every candidate slot for the day with availability and the blocking reason."""
    try:
        result = await asyncio.to_thread(
            availability_service.get_available_slots, staff_id, service_id, target_date
        )
    except DomainException as e:
        handle_domain_exception(e)

    return AvailabilityResponse.from_result(result)


@router.get("/validate", response_model=SlotValidationResponse, response_model_exclude_none=True)
async def validate_slot(
    staff_id: str = Query(..., alias="staffId", min_length=1),
    service_id: str = Query(..., alias="serviceId", min_length=1),
    slot_datetime: datetime = Query(..., alias="datetime", description="ISO-8601 instant with UTC offset"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> SlotValidationResponse:
    """Whether a single start time is still free, with the blocking reason if not."""
    try:
        check = await asyncio.to_thread(
            availability_service.check_slot, staff_id, service_id, slot_datetime
        )
    except DomainException as e:
        handle_domain_exception(e)

    return SlotValidationResponse.from_check(check, staff_id, service_id)
