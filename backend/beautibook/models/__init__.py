# backend/beautibook/models/__init__.py
"""
Database models for the booking core.

Importing this package registers every table on ``Base.metadata``.
"""

from .booking import Booking, BookingStatus
from .customer import Customer
from .hold import BookingHold
from .hold_analytics import HoldAnalytics
from .service import Service
from .staff import Staff, StaffAvailability, staff_services

__all__ = [
    "Booking",
    "BookingHold",
    "BookingStatus",
    "Customer",
    "HoldAnalytics",
    "Service",
    "Staff",
    "StaffAvailability",
    "staff_services",
]
