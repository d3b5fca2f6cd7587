# backend/beautibook/models/service.py
"""
Service catalog model.

A service's duration is what blocks a staff member's calendar: a booking or
hold for it occupies ``[start, start + duration_minutes)``.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Service(Base):
    """A bookable salon service such as a cut or a colour treatment."""

    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
        CheckConstraint("base_price >= 0", name="ck_services_price_non_negative"),
    )

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    # Minor currency units (cents)
    base_price = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    staff = relationship("Staff", secondary="staff_services", back_populates="services")

    def __repr__(self) -> str:
        return f"<Service {self.name} ({self.duration_minutes}m)>"
