# backend/beautibook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Services are built per request from the request's session and the clock
dependency; tests override ``get_clock`` to pin the current instant.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.timezone_utils import utc_now
from ...services.availability_service import AvailabilityService
from ...services.base import Clock
from ...services.booking_conversion_service import BookingConversionService
from ...services.hold_service import HoldService
from .database import get_db


def get_clock() -> Clock:
    """Source of the current instant for services."""
    return utc_now


def get_availability_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> AvailabilityService:
    return AvailabilityService(db, clock=clock)


def get_hold_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> HoldService:
    return HoldService(db, clock=clock)


def get_booking_conversion_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> BookingConversionService:
    return BookingConversionService(db, clock=clock)
