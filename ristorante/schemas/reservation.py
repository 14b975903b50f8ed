"""
Ristorante API: Reservation Schemas
====================================

What:  Public reservation form body, admin status update body, and the
       shapes returned by the reservation routes.

Date/time handling:
    The form sends a local date ("2025-06-14") and time ("20:30") as two
    strings. They are joined with one space, checked here against
    YYYY-MM-DD HH:MM[:SS], and cast to TIMESTAMPTZ by PostgreSQL in the
    session time zone (see ReservationService.create_reservation).
"""

import datetime as dt
import math
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ristorante.enums import ReservationStatus
from ristorante.schemas.base import RequestBody

REQUIRED_FIELDS_MESSAGE = "name, phone, date and time required"
PEOPLE_MESSAGE = "people must be between 1 and 30"
DATETIME_MESSAGE = "invalid date or time"

DEFAULT_PARTY_SIZE = 2
MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 30

RESERVED_AT_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


def parse_party_size(value: Any) -> int:
    """
    Party size from a JSON number or numeric string.

    Absent, null and blank mean the default of 2. Booleans, fractions,
    NaN/inf and values outside 1..30 are rejected.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_PARTY_SIZE
    if isinstance(value, bool):
        raise ValueError(PEOPLE_MESSAGE)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(PEOPLE_MESSAGE) from None
    if not math.isfinite(number) or not number.is_integer():
        raise ValueError(PEOPLE_MESSAGE)
    if not MIN_PARTY_SIZE <= number <= MAX_PARTY_SIZE:
        raise ValueError(PEOPLE_MESSAGE)
    return int(number)


class ReservationCreate(RequestBody):
    """Body of POST /api/reservations (public form)."""

    required_message: ClassVar[str] = REQUIRED_FIELDS_MESSAGE

    full_name: str = Field(alias="name")
    phone: str
    date: str
    time: str
    people: int = DEFAULT_PARTY_SIZE
    notes: Optional[str] = None

    @field_validator("full_name", "phone", "date", "time")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(REQUIRED_FIELDS_MESSAGE)
        return v

    @field_validator("people", mode="before")
    @classmethod
    def validate_people(cls, v: Any) -> int:
        return parse_party_size(v)

    @field_validator("notes")
    @classmethod
    def blank_notes_as_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def check_reserved_at(self) -> "ReservationCreate":
        for fmt in RESERVED_AT_FORMATS:
            try:
                dt.datetime.strptime(self.reserved_at_text, fmt)
                return self
            except ValueError:
                continue
        raise ValueError(DATETIME_MESSAGE)

    @property
    def reserved_at_text(self) -> str:
        """`"<date> <time>"`, the literal handed to the database cast."""
        return f"{self.date} {self.time}"


class ReservationStatusUpdate(RequestBody):
    """Body of PUT /api/admin/reservations/{id}. Case-sensitive."""

    required_message: ClassVar[str] = "invalid status"

    status: ReservationStatus


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ReservationResponse(BaseModel):
    """Full reservation row, admin list only."""

    id: int
    full_name: str
    phone: str
    people: int
    reserved_at: dt.datetime
    notes: Optional[str] = None
    status: str
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class ReservationCreated(BaseModel):
    """Echo of a public submission: no personal data goes back."""
    id: int
    created_at: dt.datetime
    status: str


class ReservationCreatedEnvelope(BaseModel):
    reservation: ReservationCreated


class ReservationStatusResponse(BaseModel):
    id: int
    status: str


class ReservationStatusEnvelope(BaseModel):
    reservation: ReservationStatusResponse


class ReservationListResponse(BaseModel):
    """GET /api/admin/reservations, newest first."""
    reservations: List[ReservationResponse]
