# backend/beautibook/services/__init__.py
"""
Service layer for the booking core.

Services own business rules and transaction boundaries; repositories own SQL.
"""

from .availability_service import AvailabilityResult, AvailabilityService, SlotAvailability
from .base import BaseService
from .booking_conversion_service import BookingConversionService, ConversionResult
from .hold_analytics_service import HoldAnalyticsService
from .hold_service import HoldService, SessionHoldStatus

__all__ = [
    "AvailabilityResult",
    "AvailabilityService",
    "BaseService",
    "BookingConversionService",
    "ConversionResult",
    "HoldAnalyticsService",
    "HoldService",
    "SessionHoldStatus",
    "SlotAvailability",
]
