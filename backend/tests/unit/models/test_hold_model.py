from datetime import datetime, timedelta, timezone

from beautibook.models.hold import BookingHold

NOW = datetime(2025, 6, 16, 16, 0, tzinfo=timezone.utc)


def _hold(expires_in: timedelta) -> BookingHold:
    return BookingHold(
        staff_id="01JSTAFF00000000000000000",
        service_id="01JSERVICE000000000000000",
        session_id="session-a",
        slot_datetime=NOW + timedelta(days=1),
        created_at=NOW,
        expires_at=NOW + expires_in,
    )


def test_hold_expires_at_the_expiry_instant():
    hold = _hold(timedelta(minutes=5))

    assert not hold.is_expired(NOW + timedelta(minutes=4, seconds=59))
    assert hold.is_expired(NOW + timedelta(minutes=5))


def test_remaining_seconds_floors_and_never_goes_negative():
    hold = _hold(timedelta(minutes=5))

    assert hold.remaining_seconds(NOW) == 300
    assert hold.remaining_seconds(NOW + timedelta(seconds=0.4)) == 299
    assert hold.remaining_seconds(NOW + timedelta(minutes=4, seconds=59)) == 1
    assert hold.remaining_seconds(NOW + timedelta(minutes=7)) == 0
