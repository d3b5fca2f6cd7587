# backend/beautibook/models/customer.py
"""Guest customer record, keyed by phone number."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship
import ulid

from ..database import Base
from .types import UTCDateTime


class Customer(Base):
    """Customer created or matched when a hold is converted."""

    __tablename__ = "customers"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    phone = Column(String(32), nullable=False, unique=True)
    email = Column(String(255), nullable=True)
    marketing_consent = Column(Boolean, nullable=False, default=False)
    total_bookings = Column(Integer, nullable=False, default=0)
    total_spent = Column(Integer, nullable=False, default=0)
    last_booking_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False)

    bookings = relationship("Booking", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer {self.name} {self.phone}>"
