# backend/modules/tables/__init__.py

from .models.table_models import (
    Area, Table, MaintenanceRecord,
    TableStatus, TableShape, MaintenanceStatus
)

from .schemas.table_schemas import (
    TableSnapshot, MaintenanceSnapshot, TimeWindow, TablePreferences,
    AvailabilityResult, TimeSuggestion, ScoreBreakdown, TableScore,
    AssignmentResult, TableStatusView
)

__all__ = [
    # Models
    "Area", "Table", "MaintenanceRecord",
    "TableStatus", "TableShape", "MaintenanceStatus",

    # Schemas
    "TableSnapshot", "MaintenanceSnapshot", "TimeWindow", "TablePreferences",
    "AvailabilityResult", "TimeSuggestion", "ScoreBreakdown", "TableScore",
    "AssignmentResult", "TableStatusView",
]
