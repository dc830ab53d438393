# backend/modules/tables/services/table_state_service.py

from datetime import datetime
from typing import Dict, FrozenSet, Iterable
import logging

from core.exceptions import InvalidTransitionError
from core.time_ranges import contains
from modules.reservations.models.reservation_models import (
    ACTIVE_STATUSES, ReservationStatus
)
from modules.reservations.schemas.reservation_schemas import ReservationSnapshot
from ..models.table_models import TableStatus, MaintenanceStatus
from ..schemas.table_schemas import MaintenanceSnapshot

logger = logging.getLogger(__name__)


TABLE_TRANSITIONS: Dict[TableStatus, FrozenSet[TableStatus]] = {
    TableStatus.AVAILABLE: frozenset(
        {TableStatus.OCCUPIED, TableStatus.RESERVED, TableStatus.MAINTENANCE}
    ),
    TableStatus.OCCUPIED: frozenset({TableStatus.AVAILABLE}),
    TableStatus.RESERVED: frozenset({TableStatus.OCCUPIED, TableStatus.AVAILABLE}),
    TableStatus.MAINTENANCE: frozenset({TableStatus.AVAILABLE}),
}


def can_transition_table(from_status: TableStatus, to_status: TableStatus) -> bool:
    """Check whether a table may move between two statuses"""
    return TableStatus(to_status) in TABLE_TRANSITIONS.get(TableStatus(from_status), ())


def validate_table_transition(from_status: TableStatus, to_status: TableStatus) -> None:
    """Validate if status transition is allowed"""
    if not can_transition_table(from_status, to_status):
        logger.warning(f"Rejected table transition {from_status} -> {to_status}")
        raise InvalidTransitionError(
            TableStatus(from_status), TableStatus(to_status), entity="table status"
        )


def _maintenance_active(record: MaintenanceSnapshot, at: datetime) -> bool:
    if record.status == MaintenanceStatus.IN_PROGRESS:
        return True
    return record.status == MaintenanceStatus.SCHEDULED and contains(
        record.scheduled_start, record.scheduled_end, at
    )


def derive_table_status(
    table_id: int,
    at: datetime,
    reservations: Iterable[ReservationSnapshot] = (),
    maintenance: Iterable[MaintenanceSnapshot] = (),
) -> TableStatus:
    """
    Work out what a table's status is at a given instant.

    Maintenance takes priority over reservations. A seated party makes the
    table occupied; any other active reservation covering the instant makes
    it reserved.
    """
    for record in maintenance:
        if record.table_id == table_id and _maintenance_active(record, at):
            return TableStatus.MAINTENANCE

    current = [
        r for r in reservations
        if r.status in ACTIVE_STATUSES
        and table_id in r.assigned_table_ids
        and contains(r.start_time, r.end_time, at)
    ]

    if any(r.status == ReservationStatus.SEATED for r in current):
        return TableStatus.OCCUPIED
    if current:
        return TableStatus.RESERVED
    return TableStatus.AVAILABLE
