# backend/modules/tables/schemas/table_schemas.py

from typing import List, Optional, Dict
from datetime import datetime, date, time, timedelta
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from ..models.table_models import TableStatus, TableShape, MaintenanceStatus


# Snapshot Schemas
class TableSnapshot(BaseModel):
    """Read-only view of a table handed to the assignment engine"""

    id: int
    table_number: Optional[str] = None
    area_id: Optional[int] = None
    area_name: Optional[str] = None
    capacity: int = Field(..., ge=1)
    min_capacity: int = Field(1, ge=1)
    shape: Optional[TableShape] = None
    is_accessible: bool = False
    is_active: bool = True
    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("min_capacity", mode="before")
    @classmethod
    def default_min_capacity(cls, v):
        return 1 if v is None else v

    @model_validator(mode="after")
    def validate_capacity_range(self):
        if self.min_capacity > self.capacity:
            raise ValueError("Minimum capacity cannot exceed capacity")
        return self

    def fits(self, party_size: int) -> bool:
        """Check that the party is within [min_capacity, capacity]"""
        return self.min_capacity <= party_size <= self.capacity


class MaintenanceSnapshot(BaseModel):
    """Maintenance window for a single table"""

    id: Optional[int] = None
    table_id: int
    scheduled_start: datetime
    scheduled_end: datetime
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    model_config = ConfigDict(from_attributes=True, frozen=True)


class TimeWindow(BaseModel):
    """Half-open [start, end) window a table is evaluated for"""

    start: datetime
    end: datetime
    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_range(self):
        if self.end <= self.start:
            raise ValueError("Window end must be after its start")
        return self

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def shifted(self, minutes: int) -> "TimeWindow":
        """Same-length window moved by the given number of minutes"""
        delta = timedelta(minutes=minutes)
        return TimeWindow(start=self.start + delta, end=self.end + delta)


class TablePreferences(BaseModel):
    """Soft seating preferences used only for ranking"""

    area_id: Optional[int] = None
    shape: Optional[TableShape] = None
    location: Optional[str] = Field(None, max_length=100)
    is_accessible: bool = False

    @field_validator("location")
    @classmethod
    def normalise_location(cls, v):
        # "any" is how the settings page stores "no preference"
        if v is None:
            return None
        v = v.strip()
        if not v or v.lower() == "any":
            return None
        return v


# Result Schemas
class AvailabilityResult(BaseModel):
    """Free tables for one window plus aggregate stats"""

    available_tables: List[TableSnapshot] = []
    total_tables: int = 0
    available_count: int = 0
    availability_rate: float = 0.0


class TimeSuggestion(BaseModel):
    """Nearby window with at least one table that fits the party"""

    start: datetime
    end: datetime
    available_count: int


class ScoreBreakdown(BaseModel):
    """Per-component match, each expressed as a 0-100 percentage"""

    capacity_fit: int = 0
    area_match: int = 0
    shape_match: int = 0
    location_match: int = 0
    accessibility: int = 0


class TableScore(BaseModel):
    """Ranking score for one candidate table"""

    table: TableSnapshot
    score: float
    breakdown: ScoreBreakdown


class AssignmentResult(BaseModel):
    """Outcome of single-table assignment; a miss is a normal result"""

    assigned: bool
    table: Optional[TableSnapshot] = None
    score: Optional[float] = None
    breakdown: Optional[ScoreBreakdown] = None
    alternatives: List[TableSnapshot] = []
    reason: Optional[str] = None


class TableStatusView(BaseModel):
    """Derived status of a table at one instant"""

    table_id: int
    status: TableStatus
    at: datetime


# Request Schemas
class WindowRequest(BaseModel):
    """Date and time range as sent by the booking screens"""

    reservation_date: date
    start_time: time
    end_time: Optional[time] = None
    duration_minutes: Optional[int] = Field(None, gt=0)


class AvailabilityRequest(WindowRequest):
    """Check which tables are free for a window"""

    table_ids: Optional[List[int]] = None


class AssignTableRequest(WindowRequest):
    """Auto-assign a table for a party"""

    party_size: int = Field(..., ge=1)
    preferences: TablePreferences = Field(default_factory=TablePreferences)


class CombinationRequest(WindowRequest):
    """Find table combinations for a large party"""

    party_size: int = Field(..., ge=1)
    max_tables: Optional[int] = Field(None, ge=1, le=6)


class CombinationResponse(BaseModel):
    """Candidate table sets, fewest tables first"""

    party_size: int
    combinations: List[List[TableSnapshot]] = []


class MultiDateAvailabilityRequest(BaseModel):
    """Same slot checked across several days"""

    dates: List[date] = Field(..., min_length=1, max_length=31)
    start_time: time
    duration_minutes: int = Field(..., gt=0)


class MultiDateAvailabilityResponse(BaseModel):
    """Availability per requested date"""

    results: Dict[date, AvailabilityResult] = {}
