# backend/beautibook/models/hold_analytics.py
"""
Hold lifecycle tracking.

One row per hold, written on a best-effort basis. The row outlives the
hold itself so conversion and abandonment can be reported later.
"""

from sqlalchemy import Column, Index, String
import ulid

from ..database import Base
from .types import UTCDateTime


class HoldAnalytics(Base):
    """Lifecycle timestamps for a single hold."""

    __tablename__ = "hold_analytics"
    __table_args__ = (Index("ix_hold_analytics_hold_id", "hold_id"),)

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    # No FK: the hold row is deleted while this record survives
    hold_id = Column(String(26), nullable=False)
    session_id = Column(String(255), nullable=False)
    staff_id = Column(String(26), nullable=False)
    service_id = Column(String(26), nullable=False)
    slot_datetime = Column(UTCDateTime, nullable=False)
    held_at = Column(UTCDateTime, nullable=False)
    released_at = Column(UTCDateTime, nullable=True)
    converted_at = Column(UTCDateTime, nullable=True)
    expired_at = Column(UTCDateTime, nullable=True)
