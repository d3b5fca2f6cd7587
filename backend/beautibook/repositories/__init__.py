# backend/beautibook/repositories/__init__.py
"""
Repository layer: all SQL for the booking core lives here.

Repositories flush but never commit; services own the unit of work.
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .customer_repository import CustomerRepository
from .factory import RepositoryFactory
from .hold_analytics_repository import HoldAnalyticsRepository
from .hold_repository import HoldRepository
from .staff_repository import ServiceRepository, StaffRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "CustomerRepository",
    "HoldAnalyticsRepository",
    "HoldRepository",
    "IRepository",
    "RepositoryFactory",
    "ServiceRepository",
    "StaffRepository",
]
