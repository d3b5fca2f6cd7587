# backend/beautibook/repositories/hold_analytics_repository.py
"""Hold lifecycle tracking rows."""

from datetime import datetime
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.hold_analytics import HoldAnalytics
from .base_repository import BaseRepository

_TRACKED_FIELDS = {"released_at", "converted_at", "expired_at"}


class HoldAnalyticsRepository(BaseRepository[HoldAnalytics]):
    """Repository for hold analytics."""

    def __init__(self, db: Session):
        super().__init__(db, HoldAnalytics)

    def mark(self, hold_ids: List[str], field: str, when: datetime) -> int:
        """Stamp a lifecycle timestamp on the rows for the given holds."""
        if field not in _TRACKED_FIELDS:
            raise ValueError(f"Unknown hold analytics field: {field}")
        if not hold_ids:
            return 0
        try:
            updated = (
                self.db.query(HoldAnalytics)
                .filter(HoldAnalytics.hold_id.in_(hold_ids))
                .update({field: when}, synchronize_session=False)
            )
            self.db.flush()
            return int(updated)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking hold analytics {field}: {str(e)}")
            raise RepositoryException(f"Failed to update hold analytics: {str(e)}")
