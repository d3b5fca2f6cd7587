# backend/beautibook/models/hold.py
"""
Booking hold model.

A hold is a short, session-scoped reservation of one staff member's slot
while the customer enters contact details. Expiry is lazy: a row whose
``expires_at`` has passed is treated as absent by every reader, whether or
not the cleanup task has deleted it yet.

The unique constraint on ``(staff_id, slot_datetime)`` is what makes two
concurrent holds on the same slot impossible; expired rows for the key are
purged in the same transaction before a new insert.
"""

from datetime import datetime
import math

from sqlalchemy import Column, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base
from .types import UTCDateTime

HOLD_SLOT_UNIQUE_CONSTRAINT = "uq_booking_holds_staff_slot"


class BookingHold(Base):
    """Exclusive, time-boxed claim on a (staff, slot start) pair."""

    __tablename__ = "booking_holds"
    __table_args__ = (
        UniqueConstraint("staff_id", "slot_datetime", name=HOLD_SLOT_UNIQUE_CONSTRAINT),
        Index("ix_booking_holds_session", "session_id"),
        Index("ix_booking_holds_expires_at", "expires_at"),
    )

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)
    session_id = Column(String(255), nullable=False)
    slot_datetime = Column(UTCDateTime, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    expires_at = Column(UTCDateTime, nullable=False)

    staff = relationship("Staff")
    service = relationship("Service")

    def is_expired(self, now: datetime) -> bool:
        """A hold stops existing at the instant it expires."""
        return now >= self.expires_at

    def remaining_seconds(self, now: datetime) -> int:
        """Whole seconds left before expiry, never negative."""
        return max(0, math.floor((self.expires_at - now).total_seconds()))

    def __repr__(self) -> str:
        return f"<BookingHold {self.id} staff={self.staff_id} slot={self.slot_datetime.isoformat()}>"
