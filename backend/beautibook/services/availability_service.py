# backend/beautibook/services/availability_service.py
"""
Availability Service for the booking core.

Computes which slot start times a customer can pick for a staff member,
a service and a business-calendar date. Every call re-derives the answer
from current working hours, confirmed bookings and unexpired holds; there
is no cache between hold changes and the next availability read.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import REASON_BOOKED, REASON_HELD, REASON_OUTSIDE_HOURS, REASON_PAST
from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import (
    LocalDisplay,
    ensure_utc,
    local_day_bounds,
    local_wall_clock_to_instant,
    to_local_display,
)
from ..models.service import Service
from ..models.staff import Staff
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.hold_repository import HoldRepository
from ..repositories.staff_repository import ServiceRepository, StaffRepository
from ..utils.time_intervals import TimeInterval
from .base import BaseService, Clock

logger = logging.getLogger(__name__)

NOT_AVAILABLE_ON_DATE_MESSAGE = "Staff member is not available on this date"
STAFF_NOT_FOUND_MESSAGE = "Staff member not found"
SERVICE_NOT_FOUND_MESSAGE = "Service not found"
INCOMPATIBLE_SERVICE_MESSAGE = "Staff member cannot perform this service"


@dataclass(frozen=True)
class SlotAvailability:
    """One candidate start time and whether it can be booked."""

    start: datetime
    end: datetime
    available: bool
    reason: Optional[str]
    local: LocalDisplay


@dataclass(frozen=True)
class SlotCheck:
    """Verdict for a single requested start time."""

    start: datetime
    available: bool
    reason: Optional[str]


@dataclass
class AvailabilityResult:
    """Slots for one staff member, service and date."""

    staff_id: str
    staff_name: str
    service_id: str
    service_name: str
    service_duration: int
    date: date
    slots: List[SlotAvailability] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    @property
    def available_slots(self) -> int:
        return sum(1 for slot in self.slots if slot.available)


class AvailabilityService(BaseService):
    """
    Service layer for slot availability.

    Overlap uses half-open intervals: a slot ``[s, e)`` is blocked by an
    occupied interval ``[o.start, o.end)`` when ``s < o.end and o.start < e``.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        staff_repository: Optional[StaffRepository] = None,
        service_repository: Optional[ServiceRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        hold_repository: Optional[HoldRepository] = None,
        slot_interval_minutes: Optional[int] = None,
    ):
        super().__init__(db, clock)
        self.staff_repository = staff_repository or RepositoryFactory.create_staff_repository(db)
        self.service_repository = (
            service_repository or RepositoryFactory.create_service_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.hold_repository = hold_repository or RepositoryFactory.create_hold_repository(db)
        self.slot_interval = timedelta(
            minutes=slot_interval_minutes or settings.slot_interval_minutes
        )

    def resolve_staff_and_service(self, staff_id: str, service_id: str) -> Tuple[Staff, Service]:
        """
        Load a staff member and a service and check the pairing.

        Raises:
            NotFoundException: Staff or service missing (or inactive)
            ValidationException: Staff cannot perform the service
        """
        staff = self.staff_repository.get_active_staff(staff_id)
        if not staff:
            raise NotFoundException(STAFF_NOT_FOUND_MESSAGE, details={"staff_id": staff_id})

        service = self.service_repository.get_active_service(service_id)
        if not service:
            raise NotFoundException(SERVICE_NOT_FOUND_MESSAGE, details={"service_id": service_id})

        if not staff.can_perform(service.id):
            raise ValidationException(
                INCOMPATIBLE_SERVICE_MESSAGE,
                code="INCOMPATIBLE_SERVICE",
                details={"staff_id": staff_id, "service_id": service_id},
            )
        return staff, service

    def get_working_windows(self, staff_id: str, target_date: date) -> List[TimeInterval]:
        """
        Working windows for a business-calendar date, as UTC intervals.

        Dated overrides replace the weekly pattern for their date; a closed
        override removes the day entirely.
        """
        rows = self.staff_repository.get_override_windows(staff_id, target_date)
        if rows:
            if any(not row.is_available for row in rows):
                return []
        else:
            rows = self.staff_repository.get_weekly_windows(staff_id, target_date.weekday())

        windows = [
            TimeInterval(
                start=local_wall_clock_to_instant(target_date, row.start_time),
                end=local_wall_clock_to_instant(target_date, row.end_time),
            )
            for row in rows
        ]
        return sorted(windows, key=lambda window: window.start)

    def iter_candidate_starts(
        self, windows: Sequence[TimeInterval]
    ) -> Iterator[Tuple[datetime, TimeInterval]]:
        """
        Lazily yield every slot start at the configured cadence.

        A window of length L yields ``floor(L / cadence)`` starts, beginning
        at the window start.
        """
        for window in windows:
            start = window.start
            while start + self.slot_interval <= window.end:
                yield start, window
                start += self.slot_interval

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self, staff_id: str, service_id: str, target_date: date
    ) -> AvailabilityResult:
        """
        Compute bookable slots for a staff member, service and local date.

        Args:
            staff_id: Staff member
            service_id: Requested service; its duration sizes each slot
            target_date: Date on the business calendar

        Returns:
            AvailabilityResult with slots in ascending time order; slots at
            or before the current instant are omitted
        """
        now = self.now()
        staff, service = self.resolve_staff_and_service(staff_id, service_id)

        result = AvailabilityResult(
            staff_id=staff.id,
            staff_name=staff.name,
            service_id=service.id,
            service_name=service.name,
            service_duration=service.duration_minutes,
            date=target_date,
        )

        windows = self.get_working_windows(staff.id, target_date)
        if not windows:
            result.message = NOT_AVAILABLE_ON_DATE_MESSAGE
            return result

        duration = timedelta(minutes=service.duration_minutes)
        day_start, day_end = local_day_bounds(target_date)
        latest_end = max(window.end for window in windows)
        search = TimeInterval(day_start, max(day_end, latest_end + duration))

        booked = [
            TimeInterval(booking.slot_datetime, booking.end_datetime)
            for booking in self.booking_repository.find_confirmed_overlapping(staff.id, search)
        ]
        held = [
            TimeInterval.from_duration(hold.slot_datetime, hold.service.duration_minutes)
            for hold in self.hold_repository.find_active_overlapping(staff.id, search, now)
            if not hold.is_expired(now)
        ]

        for start, window in self.iter_candidate_starts(windows):
            if start <= now:
                continue
            slot = TimeInterval(start, start + duration)
            reason = self._blocking_reason(slot, window, booked, held)
            result.slots.append(
                SlotAvailability(
                    start=slot.start,
                    end=slot.end,
                    available=reason is None,
                    reason=reason,
                    local=to_local_display(slot.start),
                )
            )

        self.log_operation(
            "get_available_slots",
            staff_id=staff.id,
            service_id=service.id,
            date=target_date.isoformat(),
            total_slots=result.total_slots,
            available_slots=result.available_slots,
        )
        return result

    def is_slot_within_working_hours(self, staff_id: str, start: datetime, duration_minutes: int) -> bool:
        """Whether ``[start, start + duration)`` fits inside one working window."""
        slot = TimeInterval.from_duration(start, duration_minutes)
        local_date = to_local_display(start).local_date
        return any(window.contains(slot) for window in self.get_working_windows(staff_id, local_date))

    def find_conflict(self, staff_id: str, interval: TimeInterval, now: datetime) -> Optional[str]:
        """``booked`` or ``held`` when something already occupies ``interval``, else None."""
        if self.booking_repository.find_confirmed_overlapping(staff_id, interval):
            return REASON_BOOKED
        if self.hold_repository.find_active_overlapping(staff_id, interval, now):
            return REASON_HELD
        return None

    @BaseService.measure_operation("check_slot")
    def check_slot(self, staff_id: str, service_id: str, start: datetime) -> SlotCheck:
        """
        Whether one start time could be held right now.

        Reasons follow the slot listing (booked, then held, then outside
        working hours); a start at or before the current instant reports
        ``in the past``.

        Raises:
            ValidationException: Naive start, or staff cannot perform the service
            NotFoundException: Staff or service missing
        """
        if start.tzinfo is None:
            raise ValidationException(
                "datetime must include a UTC offset", details={"field": "datetime"}
            )
        start = ensure_utc(start)
        now = self.now()
        staff, service = self.resolve_staff_and_service(staff_id, service_id)

        if start <= now:
            reason: Optional[str] = REASON_PAST
        else:
            interval = TimeInterval.from_duration(start, service.duration_minutes)
            reason = self.find_conflict(staff.id, interval, now)
            if reason is None and not self.is_slot_within_working_hours(
                staff.id, start, service.duration_minutes
            ):
                reason = REASON_OUTSIDE_HOURS

        return SlotCheck(start=start, available=reason is None, reason=reason)

    @staticmethod
    def _blocking_reason(
        slot: TimeInterval,
        window: TimeInterval,
        booked: Sequence[TimeInterval],
        held: Sequence[TimeInterval],
    ) -> Optional[str]:
        if any(slot.overlaps(other) for other in booked):
            return REASON_BOOKED
        if any(slot.overlaps(other) for other in held):
            return REASON_HELD
        if not window.contains(slot):
            return REASON_OUTSIDE_HOURS
        return None
