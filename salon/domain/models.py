"""Domain models for the salon booking rules."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, model_validator


class AppointmentStatus(StrEnum):
    SCHEDULED = "scheduled"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED})


class RejectionReason(StrEnum):
    MISSING_FIELDS = "missing_fields"
    IN_PAST = "in_past"
    OUTSIDE_HOURS = "outside_hours"
    END_BEFORE_START = "end_before_start"
    ALREADY_COMPLETED = "already_completed"
    EMPLOYEE_CONFLICT = "employee_conflict"


# ---------------------------------------------------------------------------
# Time intervals
# ---------------------------------------------------------------------------


class TimeInterval(BaseModel):
    """A half-open ``[start, end)`` range.

    ``end <= start`` is not rejected here: stored data is taken as given, and
    candidates are checked by the rule engine before they reach this type.
    """

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: TimeInterval) -> bool:
        """Strict intersection: touching at a boundary is not an overlap."""
        return self.start < other.end and other.start < self.end


# ---------------------------------------------------------------------------
# Services and employee assignment
# ---------------------------------------------------------------------------


class Service(BaseModel):
    id: str
    name: str = ""
    duration_minutes: int | None = None


class Unassigned(BaseModel):
    kind: Literal["unassigned"] = "unassigned"

    @property
    def employee_id(self) -> None:
        return None


class AssignedTo(BaseModel):
    kind: Literal["assigned"] = "assigned"
    employee_id: str


Assignment = Annotated[Union[Unassigned, AssignedTo], Field(discriminator="kind")]


def assignment_for(employee_id: str | None) -> Unassigned | AssignedTo:
    """Build an assignment from a possibly-empty employee id."""
    if employee_id:
        return AssignedTo(employee_id=employee_id)
    return Unassigned()


class _AssignableModel(BaseModel):
    """Accepts a flat ``employee_id`` key in place of ``assignment``."""

    assignment: Assignment = Field(default_factory=Unassigned)

    @model_validator(mode="before")
    @classmethod
    def _coerce_employee_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "employee_id" in data and "assignment" not in data:
            data = dict(data)
            employee_id = data.pop("employee_id")
            data["assignment"] = assignment_for(employee_id)
        return data

    @property
    def employee_id(self) -> str | None:
        return self.assignment.employee_id


# ---------------------------------------------------------------------------
# Stored bookings
# ---------------------------------------------------------------------------


class Appointment(_AssignableModel):
    id: str
    service_id: str
    service: Service | None = None
    customer_id: str | None = None
    scheduled_at: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class Shift(BaseModel):
    id: str
    employee_id: str
    start_at: datetime
    end_at: datetime
    note: str | None = None


# ---------------------------------------------------------------------------
# Candidates (proposed creates / updates, built from form state)
# ---------------------------------------------------------------------------


class AppointmentCandidate(_AssignableModel):
    id: str | None = None
    service_id: str | None = None
    customer_id: str | None = None
    scheduled_at: datetime | None = None


class ShiftCandidate(BaseModel):
    id: str | None = None
    employee_id: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    note: str | None = None


class PublicBookingRequest(_AssignableModel):
    name: str | None = None
    phone: str | None = None
    service_id: str | None = None
    scheduled_at: datetime | None = None
    note: str | None = None


# ---------------------------------------------------------------------------
# Validation results
# ---------------------------------------------------------------------------


class Ok(BaseModel):
    kind: Literal["ok"] = "ok"

    @property
    def ok(self) -> bool:
        return True


class Rejected(BaseModel):
    kind: Literal["rejected"] = "rejected"
    reason: RejectionReason
    detail: str = ""
    conflicting_ids: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False


ValidationResult = Annotated[Union[Ok, Rejected], Field(discriminator="kind")]
