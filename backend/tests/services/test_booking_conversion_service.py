"""Tests for BookingConversionService."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from beautibook.core.exceptions import (
    HoldGoneException,
    SlotUnavailableException,
    ValidationException,
)
from beautibook.models.booking import Booking, BookingStatus
from beautibook.models.customer import Customer
from beautibook.models.hold import BookingHold
from beautibook.models.hold_analytics import HoldAnalytics
from beautibook.services.booking_conversion_service import (
    HOLD_EXPIRED_MESSAGE,
    HOLD_MISSING_MESSAGE,
    SLOT_NO_LONGER_AVAILABLE_MESSAGE,
    BookingConversionService,
)
from beautibook.services.hold_service import HoldService

from tests.factories.builders import WORKDAY, create_booking, local_instant


@pytest.fixture
def hold_service(db, clock):
    return HoldService(db, clock=clock)


@pytest.fixture
def conversion_service(db, clock):
    return BookingConversionService(db, clock=clock)


@pytest.fixture
def hold(hold_service, staff, service):
    return hold_service.create_hold("session-a", staff.id, service.id, local_instant(WORKDAY, "10:00"))


def _count(db, model) -> int:
    db.expire_all()
    return db.query(model).count()


class TestConvertHold:
    def test_conversion_creates_booking_and_consumes_hold(
        self, db, conversion_service, clock, hold, staff, service
    ):
        result = conversion_service.convert_hold_to_booking(
            hold.id, "Jane Doe", "5551234567", "jane@example.com"
        )

        booking = result.booking
        assert booking.staff_id == staff.id
        assert booking.service_id == service.id
        assert booking.slot_datetime == local_instant(WORKDAY, "10:00")
        assert booking.duration_minutes == 60
        assert booking.final_price == 6500
        assert booking.status == BookingStatus.CONFIRMED.value
        assert booking.created_at == clock()
        assert _count(db, BookingHold) == 0
        assert _count(db, Booking) == 1

    def test_new_customer_is_created(self, conversion_service, hold):
        result = conversion_service.convert_hold_to_booking(
            hold.id, "Jane Doe", "5551234567", marketing_consent=True
        )

        assert result.is_returning_customer is False
        assert result.customer.phone == "5551234567"
        assert result.customer.total_bookings == 1
        assert result.customer.total_spent == 6500
        assert result.customer.marketing_consent is True
        assert result.booking.customer_id == result.customer.id

    def test_returning_customer_is_matched_by_phone(
        self, db, hold_service, conversion_service, hold, staff, service
    ):
        conversion_service.convert_hold_to_booking(hold.id, "Jane Doe", "5551234567")
        second = hold_service.create_hold(
            "session-b", staff.id, service.id, local_instant(WORKDAY, "14:00")
        )

        result = conversion_service.convert_hold_to_booking(
            second.id, "Jane Doe", "5551234567", "jane@example.com"
        )

        assert result.is_returning_customer is True
        assert result.customer.total_bookings == 2
        assert result.customer.total_spent == 13000
        assert result.customer.email == "jane@example.com"
        assert _count(db, Customer) == 1

    def test_contact_details_are_trimmed(self, conversion_service, hold):
        result = conversion_service.convert_hold_to_booking(hold.id, "  Jane Doe ", " 5551234567 ", "  ")

        assert result.booking.customer_name == "Jane Doe"
        assert result.booking.customer_phone == "5551234567"
        assert result.booking.customer_email is None

    def test_conversion_is_tracked(self, db, conversion_service, clock, hold):
        hold_id = hold.id
        conversion_service.convert_hold_to_booking(hold_id, "Jane Doe", "5551234567")

        db.expire_all()
        row = db.query(HoldAnalytics).filter(HoldAnalytics.hold_id == hold_id).one()
        assert row.converted_at == clock()

    def test_booked_slot_no_longer_appears_free(
        self, hold_service, conversion_service, hold, staff, service
    ):
        conversion_service.convert_hold_to_booking(hold.id, "Jane Doe", "5551234567")

        with pytest.raises(SlotUnavailableException) as exc_info:
            hold_service.create_hold("session-z", staff.id, service.id, local_instant(WORKDAY, "10:00"))

        assert exc_info.value.code == "SLOT_BOOKED"


class TestConversionFailures:
    def test_expired_hold_is_gone_and_nothing_is_booked(self, db, conversion_service, clock, hold):
        clock.advance(minutes=5)

        with pytest.raises(HoldGoneException) as exc_info:
            conversion_service.convert_hold_to_booking(hold.id, "Jane Doe", "5551234567")

        assert exc_info.value.message == HOLD_EXPIRED_MESSAGE
        assert exc_info.value.status_code == 410
        assert _count(db, Booking) == 0
        assert _count(db, Customer) == 0

    def test_missing_hold_is_gone(self, conversion_service):
        with pytest.raises(HoldGoneException) as exc_info:
            conversion_service.convert_hold_to_booking(
                "01JUNKNOWNHOLD00000000000", "Jane Doe", "5551234567"
            )

        assert exc_info.value.message == HOLD_MISSING_MESSAGE

    def test_second_conversion_of_same_hold_is_gone(self, db, conversion_service, hold):
        hold_id = hold.id
        conversion_service.convert_hold_to_booking(hold_id, "Jane Doe", "5551234567")

        with pytest.raises(HoldGoneException):
            conversion_service.convert_hold_to_booking(hold_id, "Jane Doe", "5551234567")

        assert _count(db, Booking) == 1

    def test_overlapping_booking_keeps_the_hold(self, db, conversion_service, clock, hold, staff, service):
        create_booking(
            db,
            staff=staff,
            service=service,
            slot=local_instant(WORKDAY, "10:00") + timedelta(minutes=30),
        )

        with pytest.raises(SlotUnavailableException) as exc_info:
            conversion_service.convert_hold_to_booking(hold.id, "Jane Doe", "5551234567")

        assert exc_info.value.message == SLOT_NO_LONGER_AVAILABLE_MESSAGE
        assert _count(db, Booking) == 1
        assert _count(db, BookingHold) == 1
        assert _count(db, Customer) == 0

    def test_unique_index_rejects_booking_when_overlap_check_misses(
        self, db, conversion_service, hold, staff, service
    ):
        hold_id = hold.id
        create_booking(db, staff=staff, service=service, slot=local_instant(WORKDAY, "10:00"))

        with patch.object(
            conversion_service.booking_repository, "find_confirmed_overlapping", return_value=[]
        ):
            with pytest.raises(SlotUnavailableException) as exc_info:
                conversion_service.convert_hold_to_booking(hold_id, "Jane Doe", "5551234567")

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == SLOT_NO_LONGER_AVAILABLE_MESSAGE
        assert exc_info.value.details["hold_id"] == hold_id
        assert _count(db, Booking) == 1
        assert _count(db, BookingHold) == 1
        assert _count(db, Customer) == 0

    @pytest.mark.parametrize(
        "name,phone",
        [
            ("", "5551234567"),
            ("   ", "5551234567"),
            ("Jane Doe", "555123"),
            ("J" * 101, "5551234567"),
        ],
    )
    def test_invalid_contact_details_are_rejected(self, db, conversion_service, hold, name, phone):
        with pytest.raises(ValidationException):
            conversion_service.convert_hold_to_booking(hold.id, name, phone)

        assert _count(db, BookingHold) == 1
        assert _count(db, Booking) == 0
