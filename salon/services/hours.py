"""Operating-hours checks for appointments and work shifts."""

from __future__ import annotations

from datetime import datetime, timezone

from dateutil import tz
from pydantic import BaseModel, Field, field_validator, model_validator


class OperatingHours(BaseModel):
    """Salon open/close hours in local hour-of-day units.

    ``timezone`` is an optional zone name. When set, timezone-aware instants
    are converted into it before the hour-of-day is read.
    """

    open_hour: int = Field(default=7, ge=0, le=23)
    close_hour: int = Field(default=21, ge=0, le=23)
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is not None and tz.gettz(value) is None:
            raise ValueError(f"unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def _open_before_close(self) -> OperatingHours:
        if self.close_hour <= self.open_hour:
            raise ValueError("close_hour must be after open_hour")
        return self

    @property
    def open_minute(self) -> int:
        return self.open_hour * 60

    @property
    def close_minute(self) -> int:
        return self.close_hour * 60


DEFAULT_HOURS = OperatingHours()


def local_wall_clock(instant: datetime, hours: OperatingHours = DEFAULT_HOURS) -> datetime:
    """Return *instant* as seen on the salon's wall clock.

    Naive instants are already local. Aware instants are only converted when
    the hours carry a timezone; otherwise their own offset is trusted.
    """
    if hours.timezone is None or instant.tzinfo is None:
        return instant
    return instant.astimezone(tz.gettz(hours.timezone))


def comparable(instant: datetime, hours: OperatingHours = DEFAULT_HOURS) -> datetime:
    """Return *instant* as naive salon time so naive and aware values compare.

    Aware instants are converted into the hours' timezone, or UTC when none
    is configured. Naive instants are taken as already being in that zone.
    """
    if instant.tzinfo is None:
        return instant
    zone = tz.gettz(hours.timezone) if hours.timezone else timezone.utc
    return instant.astimezone(zone).replace(tzinfo=None)


def minutes_since_midnight(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


def is_within_hours_for_appointment(
    instant: datetime, hours: OperatingHours = DEFAULT_HOURS
) -> bool:
    """An appointment must start in ``[open, close)``: starting at closing time is too late."""
    m = minutes_since_midnight(local_wall_clock(instant, hours))
    return hours.open_minute <= m < hours.close_minute


def is_within_hours_for_shift(
    instant: datetime, hours: OperatingHours = DEFAULT_HOURS
) -> bool:
    """A shift boundary must fall in ``[open, close]``: ending exactly at close is fine."""
    m = minutes_since_midnight(local_wall_clock(instant, hours))
    return hours.open_minute <= m <= hours.close_minute


def format_hours(hours: OperatingHours = DEFAULT_HOURS) -> str:
    return f"{hours.open_hour}:00 - {hours.close_hour}:00"
