# backend/beautibook/repositories/booking_repository.py
"""
Booking queries used for availability and conversion conflict checks.
"""

from datetime import timedelta
import logging
from typing import List, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..utils.time_intervals import TimeInterval
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for confirmed bookings on staff calendars."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def find_confirmed_overlapping(self, staff_id: str, interval: TimeInterval) -> List[Booking]:
        """
        Confirmed bookings whose occupied interval intersects ``interval``.

        A booking can start before the interval and still run into it, so the
        range query looks back by the staff member's longest booked duration
        and the exact overlap test is applied afterwards.

        Args:
            staff_id: Staff whose calendar is checked
            interval: Half-open range to test

        Returns:
            Overlapping bookings ordered by start
        """
        try:
            base = self.db.query(Booking).filter(
                Booking.staff_id == staff_id,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
            longest = (
                self.db.query(func.max(Booking.duration_minutes))
                .filter(
                    Booking.staff_id == staff_id,
                    Booking.status == BookingStatus.CONFIRMED.value,
                )
                .scalar()
            )
            if not longest:
                return []

            candidates = cast(
                List[Booking],
                base.filter(
                    Booking.slot_datetime > interval.start - timedelta(minutes=longest),
                    Booking.slot_datetime < interval.end,
                )
                .order_by(Booking.slot_datetime)
                .all(),
            )
            return [
                booking
                for booking in candidates
                if TimeInterval(booking.slot_datetime, booking.end_datetime).overlaps(interval)
            ]
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding overlapping bookings: {str(e)}")
            raise RepositoryException(f"Failed to find overlapping bookings: {str(e)}")
