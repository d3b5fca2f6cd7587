"""Business-calendar conversions across DST transitions."""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from beautibook.core.timezone_utils import (
    ensure_utc,
    format_display_time,
    local_day_bounds,
    local_wall_clock_to_instant,
    to_local_display,
)

TZ = "America/Los_Angeles"


class TestToLocalDisplay:
    def test_summer_instant_uses_daylight_offset(self):
        local = to_local_display(datetime(2025, 6, 17, 17, 0, tzinfo=timezone.utc), TZ)

        assert local.local_date == date(2025, 6, 17)
        assert local.local_time == time(10, 0)
        assert local.display == "10:00 AM"
        assert local.time_label == "10:00"
        assert local.is_dst is True

    def test_winter_instant_uses_standard_offset(self):
        local = to_local_display(datetime(2025, 1, 14, 17, 0, tzinfo=timezone.utc), TZ)

        assert local.local_time == time(9, 0)
        assert local.display == "9:00 AM"
        assert local.is_dst is False

    def test_late_utc_instant_lands_on_previous_local_date(self):
        local = to_local_display(datetime(2025, 6, 18, 2, 30, tzinfo=timezone.utc), TZ)

        assert local.local_date == date(2025, 6, 17)
        assert local.display == "7:30 PM"

    def test_naive_instant_is_rejected(self):
        with pytest.raises(ValueError):
            to_local_display(datetime(2025, 6, 17, 17, 0), TZ)


class TestLocalWallClockToInstant:
    def test_same_wall_clock_changes_offset_across_spring_forward(self):
        before = local_wall_clock_to_instant(date(2025, 3, 8), time(9, 0), tz_name=TZ)
        after = local_wall_clock_to_instant(date(2025, 3, 10), time(9, 0), tz_name=TZ)

        assert before == datetime(2025, 3, 8, 17, 0, tzinfo=timezone.utc)
        assert after == datetime(2025, 3, 10, 16, 0, tzinfo=timezone.utc)

    def test_repeated_hour_resolved_by_dst_flag(self):
        first = local_wall_clock_to_instant(date(2025, 11, 2), time(1, 30), is_dst=True, tz_name=TZ)
        second = local_wall_clock_to_instant(date(2025, 11, 2), time(1, 30), is_dst=False, tz_name=TZ)

        assert second - first == timedelta(hours=1)

    @pytest.mark.parametrize(
        "instant",
        [
            datetime(2025, 3, 9, 9, 59, 59, 123456, tzinfo=timezone.utc),
            datetime(2025, 3, 9, 10, 0, tzinfo=timezone.utc),
            datetime(2025, 11, 2, 8, 30, tzinfo=timezone.utc),
            datetime(2025, 11, 2, 9, 30, tzinfo=timezone.utc),
            datetime(2025, 12, 31, 23, 45, tzinfo=timezone.utc),
        ],
    )
    def test_display_round_trips_to_the_same_instant(self, instant):
        local = to_local_display(instant, TZ)

        restored = local_wall_clock_to_instant(
            local.local_date, local.local_time, is_dst=local.is_dst, tz_name=TZ
        )

        assert restored == instant


class TestHelpers:
    def test_spring_forward_day_is_23_hours(self):
        start, end = local_day_bounds(date(2025, 3, 9), TZ)

        assert end - start == timedelta(hours=23)

    def test_fall_back_day_is_25_hours(self):
        start, end = local_day_bounds(date(2025, 11, 2), TZ)

        assert end - start == timedelta(hours=25)

    def test_ensure_utc_treats_naive_values_as_utc(self):
        value = ensure_utc(datetime(2025, 6, 17, 17, 0))

        assert value == datetime(2025, 6, 17, 17, 0, tzinfo=timezone.utc)
        assert value.utcoffset() == timedelta(0)

    def test_display_time_strips_leading_zero(self):
        assert format_display_time(datetime(2025, 6, 17, 9, 5)) == "9:05 AM"
        assert format_display_time(datetime(2025, 6, 17, 12, 0)) == "12:00 PM"
