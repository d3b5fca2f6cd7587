# backend/beautibook/services/hold_analytics_service.py
"""
Hold lifecycle tracking.

Tracking is best effort: it runs after the primary unit of work has
committed, and a failure here is logged and dropped so it can never undo
or fail a hold, release or booking.
"""

from datetime import datetime
import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..models.hold import BookingHold
from ..repositories.factory import RepositoryFactory
from ..repositories.hold_analytics_repository import HoldAnalyticsRepository
from .base import BaseService, Clock

logger = logging.getLogger(__name__)


class HoldAnalyticsService(BaseService):
    """Records held / released / converted / expired timestamps per hold."""

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        repository: Optional[HoldAnalyticsRepository] = None,
    ):
        super().__init__(db, clock)
        self.repository = repository or RepositoryFactory.create_hold_analytics_repository(db)

    def track_hold_created(self, hold: BookingHold) -> None:
        self._record(
            "track_hold_created",
            lambda: self.repository.create(
                hold_id=hold.id,
                session_id=hold.session_id,
                staff_id=hold.staff_id,
                service_id=hold.service_id,
                slot_datetime=hold.slot_datetime,
                held_at=hold.created_at,
            ),
        )

    def track_released(self, hold_ids: List[str], when: datetime) -> None:
        if hold_ids:
            self._record("track_released", lambda: self.repository.mark(hold_ids, "released_at", when))

    def track_converted(self, hold_id: str, when: datetime) -> None:
        self._record("track_converted", lambda: self.repository.mark([hold_id], "converted_at", when))

    def track_expired(self, hold_ids: List[str], when: datetime) -> None:
        if hold_ids:
            self._record("track_expired", lambda: self.repository.mark(hold_ids, "expired_at", when))

    def _record(self, operation: str, write: Callable[[], object]) -> bool:
        try:
            write()
            self.db.commit()
            return True
        except Exception as exc:
            self.db.rollback()
            self.logger.warning(
                f"Hold analytics {operation} failed: {exc}",
                extra={"operation": operation, "error": str(exc)},
            )
            return False
