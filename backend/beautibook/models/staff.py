# backend/beautibook/models/staff.py
"""
Staff and working-hours models.

Weekly windows (``day_of_week`` set) describe a staff member's normal hours.
Dated override rows (``override_date`` set) replace the weekly windows for
that one date; an override with ``is_available=False`` closes the day.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Time,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

staff_services = Table(
    "staff_services",
    Base.metadata,
    Column("staff_id", String(26), ForeignKey("staff.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "service_id", String(26), ForeignKey("services.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Staff(Base):
    """A stylist whose calendar is the shared resource being booked."""

    __tablename__ = "staff"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    services = relationship("Service", secondary=staff_services, back_populates="staff")
    availability_windows = relationship(
        "StaffAvailability",
        back_populates="staff",
        cascade="all, delete-orphan",
    )

    def can_perform(self, service_id: str) -> bool:
        """Check the staff member's capability set."""
        return any(service.id == service_id for service in self.services)

    def __repr__(self) -> str:
        return f"<Staff {self.name}>"


class StaffAvailability(Base):
    """One working window on the business calendar (local wall-clock times)."""

    __tablename__ = "staff_availability"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_staff_availability_time_order"),
        CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="ck_staff_availability_day_of_week",
        ),
        CheckConstraint(
            "day_of_week IS NOT NULL OR override_date IS NOT NULL",
            name="ck_staff_availability_weekly_or_dated",
        ),
        Index("ix_staff_availability_staff_day", "staff_id", "day_of_week"),
        Index("ix_staff_availability_staff_override", "staff_id", "override_date"),
    )

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    # 0 = Monday ... 6 = Sunday, matching date.weekday()
    day_of_week = Column(Integer, nullable=True)
    override_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    staff = relationship("Staff", back_populates="availability_windows")

    def __repr__(self) -> str:
        when = self.override_date.isoformat() if self.override_date else f"dow={self.day_of_week}"
        return f"<StaffAvailability {self.staff_id} {when} {self.start_time}-{self.end_time}>"
