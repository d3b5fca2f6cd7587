"""Row builders for the booking-core tests."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from beautibook.core.timezone_utils import local_wall_clock_to_instant
from beautibook.models.booking import Booking, BookingStatus
from beautibook.models.hold import BookingHold
from beautibook.models.service import Service
from beautibook.models.staff import Staff, StaffAvailability

# Monday 09:00 on the business clock; the next day is a full working day
FROZEN_NOW = datetime(2025, 6, 16, 16, 0, tzinfo=timezone.utc)
TODAY = date(2025, 6, 16)
WORKDAY = date(2025, 6, 17)
DAY_OFF = date(2025, 6, 22)


def local_instant(day: date, hhmm: str) -> datetime:
    """UTC instant for a wall-clock time on the business calendar."""
    return local_wall_clock_to_instant(day, time.fromisoformat(hhmm))


def create_service(
    db: Session,
    *,
    name: str = "Haircut",
    duration_minutes: int = 60,
    base_price: int = 6500,
    is_active: bool = True,
) -> Service:
    service = Service(
        name=name,
        duration_minutes=duration_minutes,
        base_price=base_price,
        is_active=is_active,
    )
    db.add(service)
    db.commit()
    return service


def create_staff(
    db: Session,
    *,
    name: str = "Sarah Johnson",
    services: Iterable[Service] = (),
    weekdays: Iterable[int] = (1, 2, 3, 4, 5),
    start: str = "09:00",
    end: str = "18:00",
) -> Staff:
    staff = Staff(name=name, email=f"{name.split()[0].lower()}@salon.test", is_active=True)
    staff.services = list(services)
    for weekday in weekdays:
        staff.availability_windows.append(
            StaffAvailability(
                day_of_week=weekday,
                start_time=time.fromisoformat(start),
                end_time=time.fromisoformat(end),
                is_available=True,
            )
        )
    db.add(staff)
    db.commit()
    return staff


def add_override(
    db: Session,
    staff: Staff,
    override_date: date,
    *,
    start: str = "00:00",
    end: str = "23:59",
    is_available: bool = True,
) -> StaffAvailability:
    row = StaffAvailability(
        staff_id=staff.id,
        override_date=override_date,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        is_available=is_available,
    )
    db.add(row)
    db.commit()
    return row


def create_hold(
    db: Session,
    *,
    staff: Staff,
    service: Service,
    slot: datetime,
    created_at: datetime,
    session_id: str = "session-seed",
    ttl_minutes: int = 5,
) -> BookingHold:
    hold = BookingHold(
        staff_id=staff.id,
        service_id=service.id,
        session_id=session_id,
        slot_datetime=slot,
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=ttl_minutes),
    )
    db.add(hold)
    db.commit()
    return hold


def create_booking(
    db: Session,
    *,
    staff: Staff,
    service: Service,
    slot: datetime,
    duration_minutes: Optional[int] = None,
    status: BookingStatus = BookingStatus.CONFIRMED,
    customer_phone: str = "5550001111",
) -> Booking:
    booking = Booking(
        staff_id=staff.id,
        service_id=service.id,
        slot_datetime=slot,
        duration_minutes=duration_minutes or service.duration_minutes,
        customer_name="Walk In",
        customer_phone=customer_phone,
        final_price=service.base_price,
        status=status.value,
        created_at=slot - timedelta(days=1),
    )
    db.add(booking)
    db.commit()
    return booking
