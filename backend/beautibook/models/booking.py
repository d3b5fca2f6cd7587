# backend/beautibook/models/booking.py
"""
Booking model.

Bookings are created only by converting a hold. Service details that affect
the calendar (duration) and the bill (final price) are snapshotted so that
later catalog edits do not move existing appointments.
"""

from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base
from .types import UTCDateTime

BOOKING_SLOT_UNIQUE_INDEX = "uq_bookings_staff_slot_confirmed"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class Booking(Base):
    """A confirmed appointment occupying part of a staff member's calendar."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'no_show')",
            name="ck_bookings_status",
        ),
        CheckConstraint("duration_minutes > 0", name="ck_bookings_duration_positive"),
        Index(
            BOOKING_SLOT_UNIQUE_INDEX,
            "staff_id",
            "slot_datetime",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
        Index("ix_bookings_staff_slot", "staff_id", "slot_datetime"),
    )

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    staff_id = Column(String(26), ForeignKey("staff.id"), nullable=False)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)
    customer_id = Column(String(26), ForeignKey("customers.id"), nullable=True)

    slot_datetime = Column(UTCDateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    # Contact snapshot
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(32), nullable=False)
    customer_email = Column(String(255), nullable=True)

    final_price = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)
    created_at = Column(UTCDateTime, nullable=False)

    staff = relationship("Staff")
    service = relationship("Service")
    customer = relationship("Customer", back_populates="bookings")

    @property
    def end_datetime(self) -> datetime:
        return self.slot_datetime + timedelta(minutes=self.duration_minutes)

    def __repr__(self) -> str:
        return f"<Booking {self.id} staff={self.staff_id} slot={self.slot_datetime.isoformat()}>"
