# backend/beautibook/repositories/factory.py
"""
Repository Factory for the booking core.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .customer_repository import CustomerRepository
    from .hold_analytics_repository import HoldAnalyticsRepository
    from .hold_repository import HoldRepository
    from .staff_repository import ServiceRepository, StaffRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_staff_repository(db: Session) -> "StaffRepository":
        """Create repository for staff and working hours."""
        from .staff_repository import StaffRepository

        return StaffRepository(db)

    @staticmethod
    def create_service_repository(db: Session) -> "ServiceRepository":
        """Create repository for the service catalog."""
        from .staff_repository import ServiceRepository

        return ServiceRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_hold_repository(db: Session) -> "HoldRepository":
        """Create repository for booking holds."""
        from .hold_repository import HoldRepository

        return HoldRepository(db)

    @staticmethod
    def create_customer_repository(db: Session) -> "CustomerRepository":
        """Create repository for customers."""
        from .customer_repository import CustomerRepository

        return CustomerRepository(db)

    @staticmethod
    def create_hold_analytics_repository(db: Session) -> "HoldAnalyticsRepository":
        """Create repository for hold lifecycle tracking."""
        from .hold_analytics_repository import HoldAnalyticsRepository

        return HoldAnalyticsRepository(db)
