# backend/beautibook/repositories/staff_repository.py
"""
Staff, service catalog and working-hours queries.
"""

from datetime import date
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.service import Service
from ..models.staff import Staff, StaffAvailability
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class StaffRepository(BaseRepository[Staff]):
    """Repository for staff members and their availability windows."""

    def __init__(self, db: Session):
        super().__init__(db, Staff)

    def get_active_staff(self, staff_id: str) -> Optional[Staff]:
        """Active staff member with the capability set loaded."""
        try:
            return cast(
                Optional[Staff],
                self.db.query(Staff)
                .options(selectinload(Staff.services))
                .filter(Staff.id == staff_id, Staff.is_active.is_(True))
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting staff {staff_id}: {str(e)}")
            raise RepositoryException(f"Failed to get staff: {str(e)}")

    def lock_for_update(self, staff_id: str) -> Optional[Staff]:
        """
        Take a row lock on the staff member for the rest of the transaction.

        Serializes calendar writers for one staff member on PostgreSQL;
        SQLite already serializes writers at the database level.
        """
        try:
            query = self.db.query(Staff).filter(Staff.id == staff_id)
            if self.dialect_name != "sqlite":
                query = query.with_for_update()
            return cast(Optional[Staff], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking staff {staff_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock staff: {str(e)}")

    def get_override_windows(self, staff_id: str, on_date: date) -> List[StaffAvailability]:
        """Dated override rows for one calendar date."""
        try:
            return cast(
                List[StaffAvailability],
                self.db.query(StaffAvailability)
                .filter(
                    StaffAvailability.staff_id == staff_id,
                    StaffAvailability.override_date == on_date,
                )
                .order_by(StaffAvailability.start_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting override windows: {str(e)}")
            raise RepositoryException(f"Failed to get override windows: {str(e)}")

    def get_weekly_windows(self, staff_id: str, day_of_week: int) -> List[StaffAvailability]:
        """Recurring windows for a weekday (0 = Monday)."""
        try:
            return cast(
                List[StaffAvailability],
                self.db.query(StaffAvailability)
                .filter(
                    StaffAvailability.staff_id == staff_id,
                    StaffAvailability.override_date.is_(None),
                    StaffAvailability.day_of_week == day_of_week,
                    StaffAvailability.is_available.is_(True),
                )
                .order_by(StaffAvailability.start_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting weekly windows: {str(e)}")
            raise RepositoryException(f"Failed to get weekly windows: {str(e)}")


class ServiceRepository(BaseRepository[Service]):
    """Repository for the service catalog."""

    def __init__(self, db: Session):
        super().__init__(db, Service)

    def get_active_service(self, service_id: str) -> Optional[Service]:
        try:
            return cast(
                Optional[Service],
                self.db.query(Service)
                .filter(Service.id == service_id, Service.is_active.is_(True))
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting service {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to get service: {str(e)}")
