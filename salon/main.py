"""FastAPI application: pre-write validation for appointments and shifts."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import Depends, FastAPI
from pydantic import BaseModel, Field

from salon.config import Settings, get_settings
from salon.domain.models import (
    Appointment,
    AppointmentCandidate,
    PublicBookingRequest,
    Service,
    Shift,
    ShiftCandidate,
    ValidationResult,
)
from salon.services.booking_rules import (
    validate_appointment,
    validate_public_booking,
    validate_shift,
)
from salon.services.hours import OperatingHours, format_hours

logging.basicConfig(level=get_settings().log_level.upper())

app = FastAPI(title="Salon Booking Rules Service")


def get_operating_hours(settings: Settings = Depends(get_settings)) -> OperatingHours:
    return settings.operating_hours()


# ── Request / response bodies ─────────────────────────────────────────


class AppointmentValidationRequest(BaseModel):
    candidate: AppointmentCandidate
    existing: list[Appointment] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    is_editing: bool = False
    now: datetime | None = None


class ShiftValidationRequest(BaseModel):
    candidate: ShiftCandidate
    existing: list[Shift] = Field(default_factory=list)
    is_editing: bool = False
    now: datetime | None = None


class PublicBookingValidationRequest(BaseModel):
    request: PublicBookingRequest
    now: datetime | None = None


class OperatingHoursResponse(BaseModel):
    open_hour: int
    close_hour: int
    timezone: str | None = None
    label: str


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/operating-hours", response_model=OperatingHoursResponse)
def operating_hours(
    hours: OperatingHours = Depends(get_operating_hours),
) -> OperatingHoursResponse:
    """Return the configured salon hours and their display label."""
    return OperatingHoursResponse(
        open_hour=hours.open_hour,
        close_hour=hours.close_hour,
        timezone=hours.timezone,
        label=format_hours(hours),
    )


@app.post("/appointments/validate", response_model=ValidationResult)
def check_appointment(
    payload: AppointmentValidationRequest,
    hours: OperatingHours = Depends(get_operating_hours),
) -> ValidationResult:
    """Validate an appointment against the snapshot carried in the request.

    Rejections are business outcomes and come back with status 200.
    """
    return validate_appointment(
        payload.candidate,
        payload.existing,
        payload.is_editing,
        services={s.id: s for s in payload.services},
        hours=hours,
        now=payload.now,
    )


@app.post("/shifts/validate", response_model=ValidationResult)
def check_shift(
    payload: ShiftValidationRequest,
    hours: OperatingHours = Depends(get_operating_hours),
) -> ValidationResult:
    """Validate a work shift against the snapshot carried in the request."""
    return validate_shift(
        payload.candidate,
        payload.existing,
        payload.is_editing,
        hours=hours,
        now=payload.now,
    )


@app.post("/public-bookings/validate", response_model=ValidationResult)
def check_public_booking(
    payload: PublicBookingValidationRequest,
    hours: OperatingHours = Depends(get_operating_hours),
) -> ValidationResult:
    """Validate a customer self-service booking."""
    return validate_public_booking(payload.request, hours=hours, now=payload.now)
