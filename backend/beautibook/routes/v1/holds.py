# backend/beautibook/routes/v1/holds.py
"""
Booking hold routes - API v1

Versioned hold endpoints under /api/v1/holds.
All business logic delegated to HoldService and BookingConversionService.

Endpoints:
    POST / - Hold a slot for a session
    DELETE /?holdId= - Release a hold (idempotent)
    GET /?sessionId= - Active hold for a session
    POST /{hold_id}/convert - Turn a hold into a confirmed booking
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_booking_conversion_service, get_hold_service
from ...core.exceptions import DomainException
from ...schemas.hold import (
    BookingSummary,
    CustomerSummary,
    HoldConvertRequest,
    HoldConvertResponse,
    HoldCreateRequest,
    HoldCreateResponse,
    HoldReleaseResponse,
    HoldResponse,
    SessionHoldResponse,
)
from ...services.booking_conversion_service import BookingConversionService
from ...services.hold_service import HoldService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["holds-v1"])

NO_ACTIVE_HOLD_MESSAGE = "No active hold found for this session"
HOLD_EXPIRED_MESSAGE = "Hold has expired"


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()


@router.post("", response_model=HoldCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_hold(
    payload: HoldCreateRequest,
    hold_service: HoldService = Depends(get_hold_service),
) -> HoldCreateResponse:
    """Place a 5-minute exclusive hold on a slot; 409 when someone else has it."""
    try:
        hold = await asyncio.to_thread(
            hold_service.create_hold,
            payload.session_id,
            payload.staff_id,
            payload.service_id,
            payload.slot_date_time,
        )
    except DomainException as e:
        handle_domain_exception(e)

    return HoldCreateResponse(hold=HoldResponse.from_hold(hold, hold_service.now()))


@router.delete("", response_model=HoldReleaseResponse)
async def release_hold(
    hold_id: str = Query(..., alias="holdId", min_length=1),
    hold_service: HoldService = Depends(get_hold_service),
) -> HoldReleaseResponse:
    """Release a hold. Unknown or already-released ids still return success."""
    try:
        await asyncio.to_thread(hold_service.release_hold, hold_id)
    except DomainException as e:
        handle_domain_exception(e)

    return HoldReleaseResponse(hold_id=hold_id)


@router.get("", response_model=SessionHoldResponse, response_model_exclude_none=True)
async def get_session_hold(
    session_id: str = Query(..., alias="sessionId", min_length=1),
    hold_service: HoldService = Depends(get_hold_service),
) -> SessionHoldResponse:
    """Report the session's active hold, if any."""
    try:
        hold_status = await asyncio.to_thread(hold_service.get_session_hold_status, session_id)
    except DomainException as e:
        handle_domain_exception(e)

    if hold_status.hold is not None:
        return SessionHoldResponse(
            has_active_hold=True,
            hold=HoldResponse.from_hold(hold_status.hold, hold_status.now),
        )
    if hold_status.expired:
        return SessionHoldResponse(
            has_active_hold=False, expired=True, message=HOLD_EXPIRED_MESSAGE
        )
    return SessionHoldResponse(has_active_hold=False, message=NO_ACTIVE_HOLD_MESSAGE)


@router.post("/{hold_id}/convert", response_model=HoldConvertResponse)
async def convert_hold(
    hold_id: str,
    payload: HoldConvertRequest,
    conversion_service: BookingConversionService = Depends(get_booking_conversion_service),
) -> HoldConvertResponse:
    """Confirm a booking from a live hold; 410 when the hold is gone."""
    try:
        result = await asyncio.to_thread(
            conversion_service.convert_hold_to_booking,
            hold_id,
            payload.customer_name,
            payload.customer_phone,
            payload.customer_email,
            payload.marketing_consent,
        )
    except DomainException as e:
        handle_domain_exception(e)

    return HoldConvertResponse(
        booking=BookingSummary.from_booking(result.booking),
        customer=CustomerSummary.from_customer(result.customer, result.is_returning_customer),
    )
