"""
HTTP tests for /api/v1/holds.

Request and response bodies are camelCase, except the booking echo on
conversion, which uses the booking column names. Errors use the
problem-details body with ``success: false``.
"""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from beautibook.models.booking import Booking
from beautibook.models.hold import BookingHold
from beautibook.services.hold_service import HoldService

from tests.factories.builders import WORKDAY, create_booking, local_instant

HOLDS_URL = "/api/v1/holds"


def _iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def hold_payload(staff, service):
    return {
        "sessionId": "session-a",
        "staffId": staff.id,
        "serviceId": service.id,
        "slotDateTime": _iso(local_instant(WORKDAY, "10:00")),
    }


@pytest.fixture
def created_hold(client, hold_payload):
    response = client.post(HOLDS_URL, json=hold_payload)
    assert response.status_code == 201
    return response.json()["hold"]


class TestCreateHoldRoute:
    def test_create_returns_hold_with_countdown(self, client, hold_payload, clock):
        response = client.post(HOLDS_URL, json=hold_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Hold created successfully"
        hold = body["hold"]
        assert hold["sessionId"] == "session-a"
        assert hold["staffId"] == hold_payload["staffId"]
        assert _parse(hold["slotDateTime"]) == local_instant(WORKDAY, "10:00")
        assert _parse(hold["expiresAt"]) == clock() + timedelta(minutes=5)
        assert hold["remainingSeconds"] == 300
        assert hold["remainingTime"] == {"minutes": 5, "seconds": 0}

    def test_second_session_gets_conflict(self, client, hold_payload, created_hold):
        response = client.post(HOLDS_URL, json={**hold_payload, "sessionId": "session-b"})

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["status"] == 409
        assert body["code"] == "SLOT_HELD"
        assert response.headers["content-type"] == "application/json"

    def test_insert_race_lost_at_the_database_is_conflict(
        self, client, db, hold_payload, created_hold
    ):
        with patch.object(HoldService, "_ensure_slot_free", return_value=None):
            response = client.post(HOLDS_URL, json={**hold_payload, "sessionId": "session-b"})

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "SLOT_UNAVAILABLE"
        assert body["detail"] == "Slot not available"
        db.expire_all()
        assert db.query(BookingHold).one().id == created_hold["id"]

    def test_booked_slot_gets_conflict(self, client, db, hold_payload, staff, service):
        create_booking(db, staff=staff, service=service, slot=local_instant(WORKDAY, "10:00"))

        response = client.post(HOLDS_URL, json=hold_payload)

        assert response.status_code == 409
        assert response.json()["code"] == "SLOT_BOOKED"

    def test_past_slot_is_bad_request(self, client, hold_payload, clock):
        response = client.post(HOLDS_URL, json={**hold_payload, "slotDateTime": _iso(clock())})

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot create hold for past time slots"

    def test_slot_without_offset_is_bad_request(self, client, hold_payload):
        response = client.post(HOLDS_URL, json={**hold_payload, "slotDateTime": "2025-06-17T17:00:00"})

        assert response.status_code == 400

    def test_unknown_staff_is_not_found(self, client, hold_payload):
        response = client.post(HOLDS_URL, json={**hold_payload, "staffId": "01JUNKNOWNSTAFF0000000000"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Staff member not found"

    def test_missing_field_is_bad_request(self, client, hold_payload):
        payload = dict(hold_payload)
        payload.pop("sessionId")

        response = client.post(HOLDS_URL, json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_error"
        assert body["success"] is False

    def test_unknown_field_is_bad_request(self, client, hold_payload):
        response = client.post(HOLDS_URL, json={**hold_payload, "priority": "vip"})

        assert response.status_code == 400


class TestSessionHoldRoute:
    def test_no_hold_for_session(self, client):
        response = client.get(HOLDS_URL, params={"sessionId": "session-a"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "hasActiveHold": False,
            "message": "No active hold found for this session",
        }

    def test_active_hold_for_session(self, client, created_hold, clock):
        clock.advance(seconds=90)

        response = client.get(HOLDS_URL, params={"sessionId": "session-a"})

        body = response.json()
        assert body["hasActiveHold"] is True
        assert body["hold"]["id"] == created_hold["id"]
        assert body["hold"]["remainingSeconds"] == 210
        assert body["hold"]["remainingTime"] == {"minutes": 3, "seconds": 30}

    def test_expired_hold_for_session(self, client, created_hold, clock):
        clock.advance(minutes=5)

        response = client.get(HOLDS_URL, params={"sessionId": "session-a"})

        assert response.json() == {
            "success": True,
            "hasActiveHold": False,
            "expired": True,
            "message": "Hold has expired",
        }

    def test_session_id_is_required(self, client):
        response = client.get(HOLDS_URL)

        assert response.status_code == 400


class TestReleaseHoldRoute:
    def test_release_returns_success(self, client, db, created_hold):
        response = client.delete(HOLDS_URL, params={"holdId": created_hold["id"]})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Hold released successfully",
            "holdId": created_hold["id"],
        }
        db.expire_all()
        assert db.query(BookingHold).count() == 0

    def test_release_unknown_hold_still_succeeds(self, client):
        response = client.delete(HOLDS_URL, params={"holdId": "01JUNKNOWNHOLD00000000000"})

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_hold_id_is_required(self, client):
        response = client.delete(HOLDS_URL)

        assert response.status_code == 400


class TestConvertHoldRoute:
    def _convert(self, client, hold_id, **overrides):
        payload = {
            "customerName": "Jane Doe",
            "customerPhone": "5551234567",
            "customerEmail": "jane@example.com",
            "marketingConsent": True,
        }
        payload.update(overrides)
        return client.post(f"{HOLDS_URL}/{hold_id}/convert", json=payload)

    def test_convert_returns_booking_and_customer(
        self, client, db, clock, created_hold, staff, service
    ):
        response = self._convert(client, created_hold["id"])

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Booking confirmed successfully"
        booking = body["booking"]
        assert set(booking) == {
            "id",
            "staff_id",
            "service_id",
            "slot_datetime",
            "customer_name",
            "customer_phone",
            "final_price",
            "created_at",
        }
        assert booking["staff_id"] == staff.id
        assert booking["service_id"] == service.id
        assert booking["customer_name"] == "Jane Doe"
        assert booking["customer_phone"] == "5551234567"
        assert booking["final_price"] == 6500
        assert _parse(booking["slot_datetime"]) == local_instant(WORKDAY, "10:00")
        assert _parse(booking["created_at"]) == clock()
        assert body["customer"]["isReturning"] is False
        assert body["customer"]["totalBookings"] == 1
        db.expire_all()
        assert db.query(Booking).count() == 1
        assert db.query(BookingHold).count() == 0

    def test_expired_hold_is_gone(self, client, db, created_hold, clock):
        clock.advance(minutes=5, seconds=1)

        response = self._convert(client, created_hold["id"])

        assert response.status_code == 410
        assert response.json()["detail"] == "Hold has expired"
        db.expire_all()
        assert db.query(Booking).count() == 0

    def test_short_phone_is_bad_request(self, client, created_hold):
        response = self._convert(client, created_hold["id"], customerPhone="555")

        assert response.status_code == 400

    def test_conflicting_booking_is_conflict(self, client, db, created_hold, staff, service):
        create_booking(db, staff=staff, service=service, slot=local_instant(WORKDAY, "10:30"))

        response = self._convert(client, created_hold["id"])

        assert response.status_code == 409
        assert response.json()["detail"] == "This time slot is no longer available"
