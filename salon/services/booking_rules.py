"""Accept/reject rules run before an appointment or shift is written.

Every function here is pure: it reads the snapshot it is handed and returns
an ``Ok`` or a ``Rejected`` value. Business-rule failures are never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from salon.domain.models import (
    Appointment,
    AppointmentCandidate,
    AppointmentStatus,
    Ok,
    PublicBookingRequest,
    Rejected,
    RejectionReason,
    Shift,
    ShiftCandidate,
    TimeInterval,
)
from salon.services.conflicts import (
    Booking,
    ServiceLookup,
    bookings_for_employee,
    effective_interval,
    find_conflicts,
)
from salon.services.hours import (
    DEFAULT_HOURS,
    OperatingHours,
    comparable,
    format_hours,
    is_within_hours_for_appointment,
    is_within_hours_for_shift,
)

logger = logging.getLogger(__name__)


def _current(instant: datetime, now: datetime | None, hours: OperatingHours) -> datetime:
    """The clock reading *instant* is checked against, in salon time."""
    if now is None:
        now = datetime.now() if instant.tzinfo is None else datetime.now(timezone.utc)
    return comparable(now, hours)


def _in_salon_time(booking: Booking, hours: OperatingHours) -> Booking:
    if isinstance(booking, Shift):
        return booking.model_copy(
            update={
                "start_at": comparable(booking.start_at, hours),
                "end_at": comparable(booking.end_at, hours),
            }
        )
    return booking.model_copy(update={"scheduled_at": comparable(booking.scheduled_at, hours)})


def _reject(
    reason: RejectionReason,
    detail: str,
    record_id: str | None,
    conflicting_ids: list[str] | None = None,
) -> Rejected:
    logger.debug("Rejected %s (record=%s): %s", reason, record_id, detail)
    return Rejected(reason=reason, detail=detail, conflicting_ids=conflicting_ids or [])


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------


def validate_appointment(
    candidate: AppointmentCandidate,
    existing: Sequence[Appointment],
    is_editing: bool,
    *,
    services: ServiceLookup | None = None,
    hours: OperatingHours = DEFAULT_HOURS,
    now: datetime | None = None,
) -> Ok | Rejected:
    """Check a proposed appointment create or update.

    Checks run cheapest first: required fields, completed-record lock (edit
    only), past start (create only), operating hours, then the per-employee
    overlap scan. Unassigned appointments skip the overlap scan.

    *existing* may hold appointments for every employee; only those assigned
    to the candidate's employee are considered.
    """
    if _blank(candidate.service_id) or candidate.scheduled_at is None:
        return _reject(
            RejectionReason.MISSING_FIELDS,
            "service and scheduled time are required",
            candidate.id,
        )

    if is_editing and candidate.id is not None:
        stored = next((a for a in existing if a.id == candidate.id), None)
        if stored is not None and stored.status == AppointmentStatus.COMPLETED:
            return _reject(
                RejectionReason.ALREADY_COMPLETED,
                "completed appointments cannot be changed",
                candidate.id,
            )

    scheduled_at = candidate.scheduled_at
    start = comparable(scheduled_at, hours)
    if not is_editing:
        if start < _current(scheduled_at, now, hours):
            return _reject(
                RejectionReason.IN_PAST,
                "appointment cannot start in the past",
                candidate.id,
            )

    if not is_within_hours_for_appointment(scheduled_at, hours):
        return _reject(
            RejectionReason.OUTSIDE_HOURS,
            f"appointment must start within {format_hours(hours)}",
            candidate.id,
        )

    employee_id = candidate.employee_id
    if employee_id is not None:
        interval = effective_interval(candidate.model_copy(update={"scheduled_at": start}), services)
        conflicts = find_conflicts(
            interval,
            [_in_salon_time(b, hours) for b in bookings_for_employee(existing, employee_id)],
            exclude_id=candidate.id,
            services=services,
        )
        if conflicts:
            return _reject(
                RejectionReason.EMPLOYEE_CONFLICT,
                "employee already has an appointment at this time",
                candidate.id,
                [c.id for c in conflicts],
            )

    return Ok()


# ---------------------------------------------------------------------------
# Work shifts
# ---------------------------------------------------------------------------


def validate_shift(
    candidate: ShiftCandidate,
    existing: Sequence[Shift],
    is_editing: bool,
    *,
    hours: OperatingHours = DEFAULT_HOURS,
    now: datetime | None = None,
) -> Ok | Rejected:
    """Check a proposed work shift create or update.

    Unlike appointments, both ends of a shift are checked against the clock
    on create, and a shift may end exactly at closing time. Shifts have no
    terminal state, so every stored shift of the employee blocks.
    """
    if _blank(candidate.employee_id) or candidate.start_at is None or candidate.end_at is None:
        return _reject(
            RejectionReason.MISSING_FIELDS,
            "employee, start and end are required",
            candidate.id,
        )

    start_at, end_at = candidate.start_at, candidate.end_at
    start, end = comparable(start_at, hours), comparable(end_at, hours)
    if end <= start:
        return _reject(
            RejectionReason.END_BEFORE_START,
            "shift must end after it starts",
            candidate.id,
        )

    if not (is_within_hours_for_shift(start_at, hours) and is_within_hours_for_shift(end_at, hours)):
        return _reject(
            RejectionReason.OUTSIDE_HOURS,
            f"shift must fall within {format_hours(hours)}",
            candidate.id,
        )

    if not is_editing:
        current = _current(start_at, now, hours)
        if start < current or end < current:
            return _reject(
                RejectionReason.IN_PAST,
                "shift cannot be scheduled in the past",
                candidate.id,
            )

    conflicts = find_conflicts(
        TimeInterval(start=start, end=end),
        [_in_salon_time(b, hours) for b in bookings_for_employee(existing, candidate.employee_id)],
        exclude_id=candidate.id,
    )
    if conflicts:
        return _reject(
            RejectionReason.EMPLOYEE_CONFLICT,
            "employee already has a shift at this time",
            candidate.id,
            [c.id for c in conflicts],
        )

    return Ok()


# ---------------------------------------------------------------------------
# Public (customer self-service) bookings
# ---------------------------------------------------------------------------


def validate_public_booking(
    request: PublicBookingRequest,
    *,
    hours: OperatingHours = DEFAULT_HOURS,
    now: datetime | None = None,
) -> Ok | Rejected:
    """Check a walk-in booking submitted by a customer.

    The public form has no view of other bookings, so there is no overlap
    check; the server arbitrates double bookings.
    """
    if (
        _blank(request.name)
        or _blank(request.phone)
        or _blank(request.service_id)
        or request.scheduled_at is None
    ):
        return _reject(
            RejectionReason.MISSING_FIELDS,
            "name, phone, service and scheduled time are required",
            None,
        )

    if comparable(request.scheduled_at, hours) < _current(request.scheduled_at, now, hours):
        return _reject(
            RejectionReason.IN_PAST,
            "appointment cannot start in the past",
            None,
        )

    if not is_within_hours_for_appointment(request.scheduled_at, hours):
        return _reject(
            RejectionReason.OUTSIDE_HOURS,
            f"appointment must start within {format_hours(hours)}",
            None,
        )

    return Ok()
