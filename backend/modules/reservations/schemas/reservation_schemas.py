# backend/modules/reservations/schemas/reservation_schemas.py

"""
Pydantic schemas for reservation admission and booking decisions.
"""

from pydantic import (
    AliasChoices, BaseModel, Field, ConfigDict, field_validator, model_validator
)
from pydantic.alias_generators import to_camel
from datetime import date, time, datetime
from typing import Optional, List, Dict, Any, FrozenSet
from enum import Enum

from core.config import settings

from modules.tables.schemas.table_schemas import (
    TableSnapshot,
    TablePreferences,
    AssignmentResult,
    TimeSuggestion,
    TimeWindow,
)
from ..models.reservation_models import ReservationStatus


class Weekday(str, Enum):
    """Day keys used by the weekday rules, indexed like date.weekday()"""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return list(cls)[value.weekday()]


class AdmissionRejectionReason(str, Enum):
    """Why a day-level admission check failed"""

    PAST_DATE = "past_date"
    NO_RULE_DEFINED = "no_rule_defined"
    DAY_CLOSED = "day_closed"
    ADVANCE_WINDOW_EXCEEDED = "advance_window_exceeded"
    MAX_RESERVATIONS_REACHED = "max_reservations_reached"
    MAX_GUESTS_REACHED = "max_guests_reached"


class ReservationSnapshot(BaseModel):
    """Read-only view of an existing reservation"""

    id: Optional[int] = None
    customer_id: Optional[int] = None
    table_id: Optional[int] = None
    combined_table_ids: List[int] = []
    reservation_date: date
    start_time: datetime
    end_time: datetime
    party_size: int = Field(..., ge=1)
    status: ReservationStatus = ReservationStatus.PENDING
    special_requests: Optional[str] = None
    cancellation_reason: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    seated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    no_show_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("combined_table_ids", mode="before")
    @classmethod
    def default_combined_tables(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def validate_time_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("Reservation end time must be after its start time")
        return self

    @property
    def assigned_table_ids(self) -> FrozenSet[int]:
        ids = set(self.combined_table_ids)
        if self.table_id is not None:
            ids.add(self.table_id)
        return frozenset(ids)


# Settings Schemas
class WeekdayRule(BaseModel):
    """Per-weekday capacity policy"""

    enabled: bool = True
    max_reservations: Optional[int] = Field(None, ge=0)
    max_guests_total: Optional[int] = Field(None, ge=0)
    tables_available: Optional[int] = Field(None, ge=0)
    special_rules: Optional[str] = None
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class AdmissionSettings(BaseModel):
    """
    Subset of the restaurant settings consumed by admission control.

    Loaded once per request by the caller and passed in explicitly.
    """

    max_advance_days: Optional[int] = Field(None, ge=0)
    default_preferred_location: str = "any"
    default_duration_minutes: int = Field(
        120,
        gt=0,
        validation_alias=AliasChoices(
            "default_duration_minutes", "defaultDurationMinutes", "defaultDuration"
        ),
    )
    auto_confirm: bool = False
    timezone: Optional[str] = None
    weekday_rules: Dict[Weekday, WeekdayRule] = {}
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_reservation_section(cls, data):
        # Settings documents keep booking limits under a "reservations" section
        if isinstance(data, dict) and isinstance(data.get("reservations"), dict):
            section = data["reservations"]
            data = {k: v for k, v in data.items() if k != "reservations"}
            data = {**section, **data}
        return data

    def rule_for(self, value: date) -> Optional[WeekdayRule]:
        return self.weekday_rules.get(Weekday.from_date(value))


def _rule(max_reservations: int, max_guests_total: int, tables_available: int) -> WeekdayRule:
    return WeekdayRule(
        max_reservations=max_reservations,
        max_guests_total=max_guests_total,
        tables_available=tables_available,
    )


def default_admission_settings() -> AdmissionSettings:
    """Built-in settings used when the restaurant has not saved any."""
    return AdmissionSettings(
        max_advance_days=30,
        default_preferred_location="any",
        default_duration_minutes=120,
        auto_confirm=False,
        timezone="Europe/Madrid",
        weekday_rules={
            Weekday.MONDAY: _rule(20, 40, 8),
            Weekday.TUESDAY: _rule(20, 40, 8),
            Weekday.WEDNESDAY: _rule(20, 40, 8),
            Weekday.THURSDAY: _rule(25, 50, 9),
            Weekday.FRIDAY: _rule(30, 60, 10),
            Weekday.SATURDAY: _rule(30, 60, 10),
            Weekday.SUNDAY: _rule(25, 50, 9),
        },
    )


# Decision Schemas
class AdmissionDecision(BaseModel):
    """Result of the day-level policy check"""

    allowed: bool
    reason: Optional[AdmissionRejectionReason] = None
    message: Optional[str] = None
    details: Dict[str, Any] = {}


class BookingRequest(BaseModel):
    """Incoming booking request to evaluate"""

    restaurant_id: int = Field(default_factory=lambda: settings.default_restaurant_id)
    customer_id: Optional[int] = None
    reservation_date: date
    start_time: time
    end_time: Optional[time] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    party_size: int = Field(..., ge=1)
    table_id: Optional[int] = None
    preferences: TablePreferences = Field(default_factory=TablePreferences)
    special_requests: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def validate_window_fields(self):
        if self.end_time is not None and self.duration_minutes is not None:
            raise ValueError("Give either end_time or duration_minutes, not both")
        return self


class BookingDecision(BaseModel):
    """Everything the caller needs to persist or reject a booking"""

    accepted: bool
    admission: AdmissionDecision
    window: Optional[TimeWindow] = None
    table_ids: List[int] = []
    assignment: Optional[AssignmentResult] = None
    combinations: List[List[TableSnapshot]] = []
    initial_status: Optional[ReservationStatus] = None
    reason: Optional[str] = None
    suggestions: List[TimeSuggestion] = []


# Request/Response Schemas
class AdmissionRequest(BaseModel):
    """Day-level admission check request"""

    restaurant_id: int = Field(default_factory=lambda: settings.default_restaurant_id)
    reservation_date: date
    party_size: int = Field(..., ge=1)


class TransitionCheckResponse(BaseModel):
    """Whether a status change is allowed"""

    from_status: str
    to_status: str
    allowed: bool
