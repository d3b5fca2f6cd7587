"""
Timezone utilities for the booking core.

The salon runs on a single business timezone. Working hours are stored as
local wall-clock times and every instant (holds, bookings, slots) is stored
in UTC. These helpers are the only place the two meet.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from .config import settings


@dataclass(frozen=True)
class LocalDisplay:
    """An instant expressed on the business calendar."""

    local_date: date
    local_time: time
    display: str
    time_label: str
    is_dst: bool


def get_business_timezone(tz_name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Return the configured business timezone as a pytz timezone."""
    return pytz.timezone(tz_name or settings.business_timezone)


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(pytz.UTC)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC (that is how SQLite hands
    them back).
    """
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def format_display_time(local_dt: datetime) -> str:
    """Format a local datetime as a 12-hour clock label, e.g. ``9:00 AM``."""
    return local_dt.strftime("%I:%M %p").lstrip("0")


def to_local_display(instant: datetime, tz_name: Optional[str] = None) -> LocalDisplay:
    """
    Express an instant on the business calendar.

    Args:
        instant: Timezone-aware datetime
        tz_name: Optional override of the business timezone

    Returns:
        LocalDisplay with the local date, time and display strings

    Raises:
        ValueError: If the instant is naive
    """
    if instant.tzinfo is None:
        raise ValueError("to_local_display requires a timezone-aware datetime")

    tz = get_business_timezone(tz_name)
    local_dt = instant.astimezone(tz)
    return LocalDisplay(
        local_date=local_dt.date(),
        local_time=local_dt.time(),
        display=format_display_time(local_dt),
        time_label=local_dt.strftime("%H:%M"),
        is_dst=bool(local_dt.dst()),
    )


def local_wall_clock_to_instant(
    local_date: date,
    local_time: time,
    is_dst: bool = False,
    tz_name: Optional[str] = None,
) -> datetime:
    """
    Convert a business-calendar date and wall-clock time to a UTC instant.

    The UTC offset is resolved for the given date, so the same wall-clock
    time maps to different offsets either side of a DST transition.
    ``is_dst`` only matters for the repeated hour when clocks fall back.
    """
    tz = get_business_timezone(tz_name)
    naive = datetime.combine(local_date, local_time.replace(tzinfo=None))
    localized = tz.localize(naive, is_dst=is_dst)
    return localized.astimezone(pytz.UTC)


def local_day_bounds(local_date: date, tz_name: Optional[str] = None) -> Tuple[datetime, datetime]:
    """Return the UTC instants of local midnight and the following local midnight."""
    start = local_wall_clock_to_instant(local_date, time(0, 0), tz_name=tz_name)
    end = local_wall_clock_to_instant(local_date + timedelta(days=1), time(0, 0), tz_name=tz_name)
    return start, end


