# backend/beautibook/services/booking_conversion_service.py
"""
Booking Conversion Service for the booking core.

Turns a still-valid hold into a confirmed booking. The booking insert and
the hold delete share one transaction, booking first: if anything fails
the hold is still there and the slot stays protected.
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import HOLD_EVENT_CONVERTED, MAX_NAME_LENGTH, MIN_PHONE_LENGTH
from ..core.exceptions import HoldGoneException, SlotUnavailableException, ValidationException
from ..models.booking import Booking, BookingStatus
from ..models.customer import Customer
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.customer_repository import CustomerRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.hold_repository import HoldRepository
from ..repositories.staff_repository import StaffRepository
from ..utils.time_intervals import TimeInterval
from .base import BaseService, Clock
from .hold_analytics_service import HoldAnalyticsService

logger = logging.getLogger(__name__)

HOLD_MISSING_MESSAGE = (
    "Your hold has expired. Please select a new time slot to continue booking."
)
HOLD_EXPIRED_MESSAGE = "Hold has expired"
SLOT_NO_LONGER_AVAILABLE_MESSAGE = "This time slot is no longer available"


@dataclass
class ConversionResult:
    """A confirmed booking and the customer it belongs to."""

    booking: Booking
    customer: Customer
    is_returning_customer: bool


class BookingConversionService(BaseService):
    """Service layer for hold-to-booking conversion."""

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        hold_repository: Optional[HoldRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        staff_repository: Optional[StaffRepository] = None,
        customer_repository: Optional[CustomerRepository] = None,
        analytics_service: Optional[HoldAnalyticsService] = None,
    ):
        super().__init__(db, clock)
        self.hold_repository = hold_repository or RepositoryFactory.create_hold_repository(db)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.staff_repository = staff_repository or RepositoryFactory.create_staff_repository(db)
        self.customer_repository = (
            customer_repository or RepositoryFactory.create_customer_repository(db)
        )
        self.analytics_service = analytics_service or HoldAnalyticsService(db, clock=self._clock)

    @BaseService.measure_operation("convert_hold_to_booking")
    def convert_hold_to_booking(
        self,
        hold_id: str,
        customer_name: str,
        customer_phone: str,
        customer_email: Optional[str] = None,
        marketing_consent: bool = False,
    ) -> ConversionResult:
        """
        Promote a hold to a confirmed booking.

        Args:
            hold_id: Hold being converted
            customer_name: Contact name
            customer_phone: Contact phone; also identifies returning customers
            customer_email: Optional contact email
            marketing_consent: Opt-in flag stored on the customer

        Returns:
            ConversionResult with the booking and customer

        Raises:
            ValidationException: Contact details are invalid
            HoldGoneException: Hold missing or expired; the client must pick again
            SlotUnavailableException: A confirmed booking already overlaps the slot
        """
        name, phone, email = self._validate_contact(customer_name, customer_phone, customer_email)
        now = self.now()

        with self.transaction():
            hold = self.hold_repository.get_by_id(hold_id)
            if hold is None:
                raise HoldGoneException(HOLD_MISSING_MESSAGE, details={"hold_id": hold_id})
            if hold.is_expired(now):
                raise HoldGoneException(HOLD_EXPIRED_MESSAGE, details={"hold_id": hold_id})

            staff_id, slot_datetime = hold.staff_id, hold.slot_datetime
            conflict_details = {"hold_id": hold_id, "slot_datetime": slot_datetime.isoformat()}
            self.staff_repository.lock_for_update(staff_id)
            service = hold.service
            interval = TimeInterval.from_duration(slot_datetime, service.duration_minutes)
            if self.booking_repository.find_confirmed_overlapping(staff_id, interval):
                raise SlotUnavailableException(
                    SLOT_NO_LONGER_AVAILABLE_MESSAGE, details=conflict_details
                )

            customer, is_returning = self._find_or_create_customer(
                name, phone, email, marketing_consent, now
            )

            try:
                booking = self.booking_repository.create(
                    staff_id=staff_id,
                    service_id=service.id,
                    customer_id=customer.id,
                    slot_datetime=slot_datetime,
                    duration_minutes=service.duration_minutes,
                    customer_name=name,
                    customer_phone=phone,
                    customer_email=email,
                    final_price=service.base_price,
                    status=BookingStatus.CONFIRMED.value,
                    created_at=now,
                )
            except IntegrityError as exc:
                # Session instances are expired after a failed flush
                raise SlotUnavailableException(
                    SLOT_NO_LONGER_AVAILABLE_MESSAGE, details=conflict_details
                ) from exc

            # Booking is flushed; only now give up the hold
            if not self.hold_repository.delete(hold_id):
                raise HoldGoneException(HOLD_EXPIRED_MESSAGE, details={"hold_id": hold_id})

            customer.total_bookings = (customer.total_bookings or 0) + 1
            customer.total_spent = (customer.total_spent or 0) + booking.final_price
            customer.last_booking_at = now
            self.db.flush()

        prometheus_metrics.inc_hold_event(HOLD_EVENT_CONVERTED)
        self.analytics_service.track_converted(hold_id, now)
        self.log_operation(
            "convert_hold_to_booking",
            hold_id=hold_id,
            booking_id=booking.id,
            staff_id=booking.staff_id,
            returning_customer=is_returning,
        )
        return ConversionResult(booking=booking, customer=customer, is_returning_customer=is_returning)

    def _find_or_create_customer(
        self,
        name: str,
        phone: str,
        email: Optional[str],
        marketing_consent: bool,
        now: datetime,
    ) -> Tuple[Customer, bool]:
        customer = self.customer_repository.get_by_phone(phone)
        if customer:
            if email:
                customer.email = email
            if marketing_consent:
                customer.marketing_consent = True
            return customer, (customer.total_bookings or 0) > 0

        customer = self.customer_repository.create(
            name=name,
            phone=phone,
            email=email,
            marketing_consent=marketing_consent,
            total_bookings=0,
            total_spent=0,
            created_at=now,
        )
        return customer, False

    @staticmethod
    def _validate_contact(
        name: Optional[str], phone: Optional[str], email: Optional[str]
    ) -> Tuple[str, str, Optional[str]]:
        clean_name = (name or "").strip()
        clean_phone = (phone or "").strip()
        clean_email = (email or "").strip() or None

        if not clean_name:
            raise ValidationException("Customer name is required", details={"field": "customerName"})
        if len(clean_name) > MAX_NAME_LENGTH:
            raise ValidationException("Customer name is too long", details={"field": "customerName"})
        if len(clean_phone) < MIN_PHONE_LENGTH:
            raise ValidationException(
                f"Phone number must be at least {MIN_PHONE_LENGTH} characters",
                details={"field": "customerPhone"},
            )
        return clean_name, clean_phone, clean_email
