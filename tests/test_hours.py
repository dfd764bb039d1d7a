"""Tests for the operating-hours checks."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from salon.services.hours import (
    OperatingHours,
    comparable,
    format_hours,
    is_within_hours_for_appointment,
    is_within_hours_for_shift,
    local_wall_clock,
)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 6, 2, hour, minute)


@pytest.mark.parametrize("hour", [7, 8, 12, 20])
def test_appointment_inside_hours(hour):
    assert is_within_hours_for_appointment(_at(hour))
    assert is_within_hours_for_appointment(_at(hour, 59))


@pytest.mark.parametrize("hour", [0, 6, 21, 22, 23])
def test_appointment_outside_hours(hour):
    assert not is_within_hours_for_appointment(_at(hour, 30))


def test_closing_time_is_valid_for_shifts_only():
    """Exactly 21:00 ends a shift but is too late to start an appointment."""
    assert is_within_hours_for_shift(_at(21))
    assert not is_within_hours_for_appointment(_at(21))


def test_shift_just_after_close_is_outside():
    assert not is_within_hours_for_shift(_at(21, 1))


def test_opening_time_is_inclusive_for_both():
    assert is_within_hours_for_shift(_at(7))
    assert is_within_hours_for_appointment(_at(7))
    assert not is_within_hours_for_shift(_at(6, 59))


def test_custom_hours():
    hours = OperatingHours(open_hour=9, close_hour=17)
    assert not is_within_hours_for_appointment(_at(8, 30), hours)
    assert is_within_hours_for_appointment(_at(16, 59), hours)
    assert is_within_hours_for_shift(_at(17), hours)
    assert not is_within_hours_for_appointment(_at(17), hours)


def test_timezone_converts_aware_instants():
    hours = OperatingHours(timezone="Asia/Ho_Chi_Minh")
    # 13:30 UTC is 20:30 in UTC+7; 14:30 UTC is 21:30.
    assert is_within_hours_for_appointment(
        datetime(2026, 6, 2, 13, 30, tzinfo=timezone.utc), hours
    )
    assert not is_within_hours_for_appointment(
        datetime(2026, 6, 2, 14, 30, tzinfo=timezone.utc), hours
    )


def test_naive_instants_are_already_local():
    hours = OperatingHours(timezone="Asia/Ho_Chi_Minh")
    assert local_wall_clock(_at(10), hours) == _at(10)


def test_aware_instants_without_timezone_use_own_offset():
    instant = datetime(2026, 6, 2, 22, 0, tzinfo=timezone.utc)
    assert local_wall_clock(instant) is instant
    assert not is_within_hours_for_appointment(instant)


def test_close_must_follow_open():
    with pytest.raises(ValidationError):
        OperatingHours(open_hour=21, close_hour=7)


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        OperatingHours(timezone="Nowhere/Salon")


def test_format_hours():
    assert format_hours() == "7:00 - 21:00"
    assert format_hours(OperatingHours(open_hour=9, close_hour=18)) == "9:00 - 18:00"


def test_close_hour_is_an_hour_of_day():
    with pytest.raises(ValidationError):
        OperatingHours(open_hour=7, close_hour=24)
    assert OperatingHours(open_hour=7, close_hour=23).close_minute == 23 * 60


def test_comparable_converts_aware_instants_to_salon_time():
    instant = datetime(2026, 6, 2, 3, 0, tzinfo=timezone.utc)
    assert comparable(instant) == datetime(2026, 6, 2, 3, 0)
    hours = OperatingHours(timezone="Asia/Ho_Chi_Minh")
    assert comparable(instant, hours) == datetime(2026, 6, 2, 10, 0)
    assert comparable(datetime(2026, 6, 2, 10, 0), hours) == datetime(2026, 6, 2, 10, 0)
