"""
FastAPI dependencies for the booking API.
"""

from .database import get_db
from .services import (
    get_availability_service,
    get_booking_conversion_service,
    get_clock,
    get_hold_service,
)

__all__ = [
    "get_availability_service",
    "get_booking_conversion_service",
    "get_clock",
    "get_db",
    "get_hold_service",
]
