# backend/beautibook/services/hold_service.py
"""
Hold Service for the booking core.

Creates, reads, releases and expires slot holds. The guarantee this module
exists for: at most one unexpired hold per (staff, slot start). The database
enforces it with the ``uq_booking_holds_staff_slot`` unique constraint; the
overlap check before the insert only produces a friendlier error and is
never relied on for exclusion.

Expiry is lazy. A hold with ``now >= expires_at`` reads as absent everywhere;
``cleanup_expired_holds`` only reclaims storage.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import (
    HOLD_EVENT_CONFLICT,
    HOLD_EVENT_CREATED,
    HOLD_EVENT_EXPIRED_CLEANUP,
    HOLD_EVENT_RELEASED,
    REASON_BOOKED,
    REASON_HELD,
)
from ..core.exceptions import SlotUnavailableException, ValidationException
from ..core.timezone_utils import ensure_utc
from ..models.hold import HOLD_SLOT_UNIQUE_CONSTRAINT, BookingHold
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.hold_repository import HoldRepository
from ..utils.time_intervals import TimeInterval
from .availability_service import AvailabilityService
from .base import BaseService, Clock
from .hold_analytics_service import HoldAnalyticsService

logger = logging.getLogger(__name__)

PAST_SLOT_MESSAGE = "Cannot create hold for past time slots"
OUTSIDE_HOURS_MESSAGE = "Requested time is outside the staff member's working hours"
SLOT_UNAVAILABLE_MESSAGE = "Slot not available"
BOOKED_CONFLICT_MESSAGE = "Slot not available: conflicts with an existing booking"
HELD_CONFLICT_MESSAGE = "Slot not available: currently held by another customer"


@dataclass(frozen=True)
class SessionHoldStatus:
    """What a session currently holds, as of ``now``."""

    hold: Optional[BookingHold]
    expired: bool
    now: datetime


class HoldService(BaseService):
    """
    Service layer for booking holds.

    A session holds at most one slot: creating a hold deletes the session's
    previous holds in the same transaction, so a failed create leaves the
    previous hold in place.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        hold_repository: Optional[HoldRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        availability_service: Optional[AvailabilityService] = None,
        analytics_service: Optional[HoldAnalyticsService] = None,
        hold_ttl_minutes: Optional[int] = None,
    ):
        super().__init__(db, clock)
        self.hold_repository = hold_repository or RepositoryFactory.create_hold_repository(db)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.availability_service = availability_service or AvailabilityService(
            db,
            clock=self._clock,
            booking_repository=self.booking_repository,
            hold_repository=self.hold_repository,
        )
        self.analytics_service = analytics_service or HoldAnalyticsService(db, clock=self._clock)
        self.hold_ttl = timedelta(minutes=hold_ttl_minutes or settings.hold_ttl_minutes)

    @BaseService.measure_operation("create_hold")
    def create_hold(
        self, session_id: str, staff_id: str, service_id: str, slot_datetime: datetime
    ) -> BookingHold:
        """
        Place an exclusive hold on a slot.

        Args:
            session_id: Opaque client session token
            staff_id: Staff member whose calendar is held
            service_id: Service the customer intends to book
            slot_datetime: Slot start; must carry a UTC offset

        Returns:
            The new hold, expiring ``hold_ttl`` after creation

        Raises:
            ValidationException: Bad input, past slot, incompatible service,
                or outside working hours
            NotFoundException: Unknown staff or service
            SlotUnavailableException: Slot overlaps a booking or another
                active hold, including losing a concurrent insert race
        """
        self._require("sessionId", session_id)
        self._require("staffId", staff_id)
        self._require("serviceId", service_id)
        if slot_datetime.tzinfo is None:
            raise ValidationException(
                "slotDateTime must include a UTC offset", details={"field": "slotDateTime"}
            )

        slot = ensure_utc(slot_datetime)
        now = self.now()
        if slot <= now:
            raise ValidationException(PAST_SLOT_MESSAGE, code="PAST_SLOT")

        staff, service = self.availability_service.resolve_staff_and_service(staff_id, service_id)
        if not self.availability_service.is_slot_within_working_hours(
            staff.id, slot, service.duration_minutes
        ):
            raise ValidationException(OUTSIDE_HOURS_MESSAGE, code="OUTSIDE_WORKING_HOURS")

        # A failed flush expires every instance in the session; keep plain values
        staff_id, service_id = staff.id, service.id
        interval = TimeInterval.from_duration(slot, service.duration_minutes)
        try:
            with self.transaction():
                lapsed = self.hold_repository.delete_expired_for_staff(staff_id, now)
                superseded = self.hold_repository.delete_for_session(session_id)
                self._ensure_slot_free(staff_id, interval, now)
                try:
                    hold = self.hold_repository.create(
                        staff_id=staff_id,
                        service_id=service_id,
                        session_id=session_id,
                        slot_datetime=slot,
                        created_at=now,
                        expires_at=now + self.hold_ttl,
                    )
                except IntegrityError as exc:
                    raise SlotUnavailableException(
                        SLOT_UNAVAILABLE_MESSAGE,
                        details={
                            "staff_id": staff_id,
                            "slot_datetime": slot.isoformat(),
                            "constraint": _constraint_name(exc),
                        },
                    ) from exc
        except SlotUnavailableException:
            prometheus_metrics.inc_hold_event(HOLD_EVENT_CONFLICT)
            raise

        prometheus_metrics.inc_hold_event(HOLD_EVENT_CREATED)
        if lapsed:
            prometheus_metrics.inc_hold_event(HOLD_EVENT_EXPIRED_CLEANUP, len(lapsed))
            self.analytics_service.track_expired(lapsed, now)
        if superseded:
            prometheus_metrics.inc_hold_event(HOLD_EVENT_RELEASED, len(superseded))
            self.analytics_service.track_released(superseded, now)
        self.analytics_service.track_hold_created(hold)

        self.log_operation(
            "create_hold",
            hold_id=hold.id,
            session_id=session_id,
            staff_id=staff_id,
            slot_datetime=slot.isoformat(),
            superseded=len(superseded),
        )
        return hold

    @BaseService.measure_operation("get_active_hold_by_session")
    def get_active_hold_by_session(self, session_id: str) -> Optional[BookingHold]:
        """The session's unexpired hold, or None. Expired holds are never returned."""
        now = self.now()
        hold = self.hold_repository.get_active_by_session(session_id, now)
        if hold is None or hold.is_expired(now):
            return None
        return hold

    def get_session_hold_status(self, session_id: str) -> SessionHoldStatus:
        """Active hold for a session, plus whether its latest hold has lapsed."""
        now = self.now()
        hold = self.hold_repository.get_active_by_session(session_id, now)
        if hold is not None and not hold.is_expired(now):
            return SessionHoldStatus(hold=hold, expired=False, now=now)

        latest = self.hold_repository.get_latest_by_session(session_id)
        return SessionHoldStatus(hold=None, expired=latest is not None, now=now)

    def get_hold_by_id(self, hold_id: str) -> Optional[BookingHold]:
        """
        Raw hold lookup.

        Returns the row even if it has expired; use ``is_expired`` to check.
        """
        return self.hold_repository.get_by_id(hold_id)

    @BaseService.measure_operation("release_hold")
    def release_hold(self, hold_id: str) -> bool:
        """
        Delete a hold. Releasing an unknown or already-released hold is a no-op.

        Returns:
            True when a row was deleted
        """
        self._require("holdId", hold_id)
        now = self.now()
        with self.transaction():
            deleted = self.hold_repository.delete(hold_id)

        if deleted:
            prometheus_metrics.inc_hold_event(HOLD_EVENT_RELEASED)
            self.analytics_service.track_released([hold_id], now)
            self.log_operation("release_hold", hold_id=hold_id)
        else:
            self.logger.info(f"Release requested for unknown hold {hold_id}")
        return deleted

    @BaseService.measure_operation("cleanup_expired_holds")
    def cleanup_expired_holds(self) -> int:
        """Physically delete expired holds. Returns how many were removed."""
        now = self.now()
        with self.transaction():
            expired_ids = self.hold_repository.delete_expired(now)

        if expired_ids:
            prometheus_metrics.inc_hold_event(HOLD_EVENT_EXPIRED_CLEANUP, len(expired_ids))
            self.analytics_service.track_expired(expired_ids, now)
            self.log_operation("cleanup_expired_holds", deleted=len(expired_ids))
        return len(expired_ids)

    def remaining_seconds(self, hold: BookingHold, now: Optional[datetime] = None) -> int:
        return hold.remaining_seconds(now or self.now())

    def _ensure_slot_free(self, staff_id: str, interval: TimeInterval, now: datetime) -> None:
        reason = self.availability_service.find_conflict(staff_id, interval, now)
        if reason == REASON_BOOKED:
            raise SlotUnavailableException(BOOKED_CONFLICT_MESSAGE, code="SLOT_BOOKED")
        if reason == REASON_HELD:
            raise SlotUnavailableException(HELD_CONFLICT_MESSAGE, code="SLOT_HELD")

    @staticmethod
    def _require(field_name: str, value: Optional[str]) -> None:
        if not value or not value.strip():
            raise ValidationException(f"{field_name} is required", details={"field": field_name})


def _constraint_name(exc: IntegrityError) -> str:
    """Best-effort name of the violated constraint."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if isinstance(name, str) and name:
        return name
    return HOLD_SLOT_UNIQUE_CONSTRAINT
