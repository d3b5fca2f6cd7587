# backend/beautibook/repositories/hold_repository.py
"""
Hold queries.

Every "active" query takes ``now`` from the caller and filters on
``expires_at > now``; expired rows are invisible even before cleanup
deletes them.
"""

from datetime import datetime, timedelta
import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.hold import BookingHold
from ..models.service import Service
from ..utils.time_intervals import TimeInterval
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class HoldRepository(BaseRepository[BookingHold]):
    """Repository for booking holds."""

    def __init__(self, db: Session):
        super().__init__(db, BookingHold)

    def get_active_by_session(self, session_id: str, now: datetime) -> Optional[BookingHold]:
        """Newest unexpired hold for a session."""
        try:
            return cast(
                Optional[BookingHold],
                self.db.query(BookingHold)
                .filter(BookingHold.session_id == session_id, BookingHold.expires_at > now)
                .order_by(BookingHold.created_at.desc())
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting active hold for session: {str(e)}")
            raise RepositoryException(f"Failed to get active hold: {str(e)}")

    def get_latest_by_session(self, session_id: str) -> Optional[BookingHold]:
        """Newest hold for a session whether or not it has expired."""
        try:
            return cast(
                Optional[BookingHold],
                self.db.query(BookingHold)
                .filter(BookingHold.session_id == session_id)
                .order_by(BookingHold.created_at.desc())
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting latest hold for session: {str(e)}")
            raise RepositoryException(f"Failed to get latest hold: {str(e)}")

    def find_active_overlapping(
        self, staff_id: str, interval: TimeInterval, now: datetime
    ) -> List[BookingHold]:
        """
        Unexpired holds for a staff member whose service interval intersects ``interval``.

        Hold width comes from the held service's duration, loaded with the hold.
        """
        try:
            longest = self.db.query(func.max(Service.duration_minutes)).scalar()
            if not longest:
                return []

            candidates = cast(
                List[BookingHold],
                self.db.query(BookingHold)
                .options(joinedload(BookingHold.service))
                .filter(
                    BookingHold.staff_id == staff_id,
                    BookingHold.expires_at > now,
                    BookingHold.slot_datetime > interval.start - timedelta(minutes=longest),
                    BookingHold.slot_datetime < interval.end,
                )
                .order_by(BookingHold.slot_datetime)
                .all(),
            )
            return [
                hold
                for hold in candidates
                if TimeInterval.from_duration(
                    hold.slot_datetime, hold.service.duration_minutes
                ).overlaps(interval)
            ]
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding overlapping holds: {str(e)}")
            raise RepositoryException(f"Failed to find overlapping holds: {str(e)}")

    def delete_expired_for_staff(self, staff_id: str, now: datetime) -> List[str]:
        """
        Purge a staff member's expired rows so they cannot trip the unique constraint.

        Returns the deleted ids.
        """
        try:
            ids = [
                row.id
                for row in self.db.query(BookingHold.id)
                .filter(BookingHold.staff_id == staff_id, BookingHold.expires_at <= now)
                .all()
            ]
            if ids:
                self.db.query(BookingHold).filter(BookingHold.id.in_(ids)).delete(
                    synchronize_session=False
                )
                self.db.flush()
            return ids
        except SQLAlchemyError as e:
            self.logger.error(f"Error purging expired holds for staff: {str(e)}")
            raise RepositoryException(f"Failed to purge expired holds: {str(e)}")

    def delete_for_session(self, session_id: str) -> List[str]:
        """Delete every hold owned by a session; returns the deleted ids."""
        try:
            ids = [
                row.id
                for row in self.db.query(BookingHold.id)
                .filter(BookingHold.session_id == session_id)
                .all()
            ]
            if ids:
                self.db.query(BookingHold).filter(BookingHold.id.in_(ids)).delete(
                    synchronize_session=False
                )
                self.db.flush()
            return ids
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting session holds: {str(e)}")
            raise RepositoryException(f"Failed to delete session holds: {str(e)}")

    def delete_expired(self, now: datetime) -> List[str]:
        """Delete every expired hold; returns the deleted ids."""
        try:
            ids = [
                row.id
                for row in self.db.query(BookingHold.id)
                .filter(BookingHold.expires_at <= now)
                .all()
            ]
            if ids:
                self.db.query(BookingHold).filter(BookingHold.id.in_(ids)).delete(
                    synchronize_session=False
                )
                self.db.flush()
            return ids
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting expired holds: {str(e)}")
            raise RepositoryException(f"Failed to delete expired holds: {str(e)}")
