"""Service for detecting scheduling conflicts between bookings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Union

from salon.domain.models import (
    TERMINAL_STATUSES,
    Appointment,
    AppointmentCandidate,
    Service,
    Shift,
    ShiftCandidate,
    TimeInterval,
)

DEFAULT_DURATION_MINUTES = 60

Booking = Union[Appointment, Shift]
ServiceLookup = Mapping[str, Service]


def resolve_duration_minutes(
    service_id: str | None,
    service: Service | None = None,
    services: ServiceLookup | None = None,
) -> int:
    """Return the configured length of a service in minutes.

    An embedded service wins over the lookup table. Unknown services, and
    services declaring no duration or a non-positive one, fall back to
    ``DEFAULT_DURATION_MINUTES``.
    """
    if service is None and services is not None and service_id is not None:
        service = services.get(service_id)
    if service is None or not service.duration_minutes or service.duration_minutes <= 0:
        return DEFAULT_DURATION_MINUTES
    return service.duration_minutes


def _appointment_interval(
    start: datetime,
    service_id: str | None,
    service: Service | None,
    services: ServiceLookup | None,
) -> TimeInterval:
    minutes = resolve_duration_minutes(service_id, service, services)
    return TimeInterval(start=start, end=start + timedelta(minutes=minutes))


def effective_interval(
    booking: Appointment | Shift | AppointmentCandidate | ShiftCandidate,
    services: ServiceLookup | None = None,
) -> TimeInterval:
    """Return the ``[start, end)`` range a booking occupies.

    Shifts carry their interval explicitly. Appointments only carry a start;
    their end is derived from the service duration.
    """
    if isinstance(booking, (Shift, ShiftCandidate)):
        if booking.start_at is None or booking.end_at is None:
            raise ValueError("shift has no start_at/end_at")
        return TimeInterval(start=booking.start_at, end=booking.end_at)

    if booking.scheduled_at is None:
        raise ValueError("appointment has no scheduled_at")
    service = booking.service if isinstance(booking, Appointment) else None
    return _appointment_interval(booking.scheduled_at, booking.service_id, service, services)


def is_blocking(booking: Booking) -> bool:
    """Shifts always block; appointments stop blocking once completed or cancelled."""
    if isinstance(booking, Appointment):
        return booking.status not in TERMINAL_STATUSES
    return True


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Overlap rule: conflict if a.start < b.end AND b.start < a.end.

    Exact boundary touches (end == start) are NOT considered conflicts.
    """
    return a.overlaps(b)


def bookings_for_employee(existing: Iterable[Booking], employee_id: str) -> list[Booking]:
    """Return the bookings held by one employee. Unassigned appointments are dropped."""
    return [b for b in existing if b.employee_id == employee_id]


def _conflicting(
    candidate: TimeInterval,
    existing: Iterable[Booking],
    exclude_id: str | None,
    services: ServiceLookup | None,
) -> Iterable[Booking]:
    for booking in existing:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        if not is_blocking(booking):
            continue
        if overlaps(candidate, effective_interval(booking, services)):
            yield booking


def find_conflicts(
    candidate: TimeInterval,
    existing: Iterable[Booking],
    exclude_id: str | None = None,
    services: ServiceLookup | None = None,
) -> list[Booking]:
    """Return existing bookings that overlap with the given interval.

    *existing* is expected to be scoped to a single employee already. The
    record with id *exclude_id* (the one being edited) is skipped, as are
    completed and cancelled appointments.
    """
    return list(_conflicting(candidate, existing, exclude_id, services))


def has_conflict(
    candidate: TimeInterval,
    existing: Iterable[Booking],
    exclude_id: str | None = None,
    services: ServiceLookup | None = None,
) -> bool:
    """Same as :func:`find_conflicts` but stops at the first overlap."""
    return any(True for _ in _conflicting(candidate, existing, exclude_id, services))
