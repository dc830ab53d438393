# backend/modules/tables/services/availability_service.py

"""
Table availability for a time window.

This is the single place that decides whether a table is conflict-free:
both assignment paths go through it, so a table excluded here is never
handed out for the same window.
"""

from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from core.exceptions import InvalidInputError
from core.time_ranges import overlaps
from modules.reservations.models.reservation_models import ACTIVE_STATUSES
from modules.reservations.schemas.reservation_schemas import ReservationSnapshot
from ..models.table_models import MaintenanceStatus
from ..schemas.table_schemas import (
    AvailabilityResult,
    MaintenanceSnapshot,
    TableSnapshot,
    TimeSuggestion,
    TimeWindow,
)

logger = logging.getLogger(__name__)


def build_window(
    target_date: date,
    start_time: time,
    end_time: Optional[time] = None,
    duration_minutes: Optional[int] = None,
) -> TimeWindow:
    """
    Turn a date plus start/end (or start plus duration) into a window.

    A duration may run past midnight; an explicit end time must be later
    on the same day.
    """
    if (end_time is None) == (duration_minutes is None):
        raise InvalidInputError("Provide exactly one of end_time or duration_minutes")

    start = datetime.combine(target_date, start_time)
    if duration_minutes is not None:
        if duration_minutes <= 0:
            raise InvalidInputError("Duration must be a positive number of minutes")
        end = start + timedelta(minutes=duration_minutes)
    else:
        end = datetime.combine(target_date, end_time)
        if end <= start:
            raise InvalidInputError(
                f"End time {end_time} must be after start time {start_time}"
            )

    return TimeWindow(start=start, end=end)


def maintenance_blocks(record: MaintenanceSnapshot, window: TimeWindow) -> bool:
    """Ongoing maintenance always blocks; scheduled maintenance blocks if it overlaps"""
    if record.status == MaintenanceStatus.IN_PROGRESS:
        return True
    if record.status == MaintenanceStatus.SCHEDULED:
        return overlaps(
            record.scheduled_start, record.scheduled_end, window.start, window.end
        )
    return False


def reservation_blocks(
    reservation: ReservationSnapshot,
    table_id: int,
    window: TimeWindow,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    if exclude_reservation_id is not None and reservation.id == exclude_reservation_id:
        return False
    if reservation.status not in ACTIVE_STATUSES:
        return False
    if table_id not in reservation.assigned_table_ids:
        return False
    return overlaps(
        reservation.start_time, reservation.end_time, window.start, window.end
    )


def is_table_free(
    table_id: int,
    window: TimeWindow,
    reservations: Iterable[ReservationSnapshot] = (),
    maintenance: Iterable[MaintenanceSnapshot] = (),
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    """Check a single table for conflicting reservations and maintenance"""
    for record in maintenance:
        if record.table_id == table_id and maintenance_blocks(record, window):
            return False

    for reservation in reservations:
        if reservation_blocks(reservation, table_id, window, exclude_reservation_id):
            return False

    return True


def find_available_tables(
    tables: Sequence[TableSnapshot],
    window: TimeWindow,
    reservations: Sequence[ReservationSnapshot] = (),
    maintenance: Sequence[MaintenanceSnapshot] = (),
    exclude_reservation_id: Optional[int] = None,
) -> AvailabilityResult:
    """
    Return the active tables that are free for the whole window.

    Inactive tables are neither offered nor counted in the totals.
    """
    active_tables = [table for table in tables if table.is_active]

    available = [
        table
        for table in active_tables
        if is_table_free(
            table.id, window, reservations, maintenance, exclude_reservation_id
        )
    ]

    total = len(active_tables)
    rate = len(available) / total if total else 0.0

    logger.debug(
        f"Availability {window.start:%Y-%m-%d %H:%M}-{window.end:%H:%M}: "
        f"{len(available)}/{total} tables free"
    )

    return AvailabilityResult(
        available_tables=available,
        total_tables=total,
        available_count=len(available),
        availability_rate=rate,
    )


def find_multi_date_availability(
    tables: Sequence[TableSnapshot],
    dates: Iterable[date],
    start_time: time,
    duration_minutes: int,
    reservations: Sequence[ReservationSnapshot] = (),
    maintenance: Sequence[MaintenanceSnapshot] = (),
) -> Dict[date, AvailabilityResult]:
    """Batch availability for the same time slot across several days"""
    results: Dict[date, AvailabilityResult] = {}

    for target_date in dates:
        window = build_window(target_date, start_time, duration_minutes=duration_minutes)
        day_reservations = [
            r for r in reservations
            if overlaps(r.start_time, r.end_time, window.start, window.end)
        ]
        results[target_date] = find_available_tables(
            tables, window, day_reservations, maintenance
        )

    return results


def filter_candidate_tables(
    tables: Sequence[TableSnapshot],
    party_size: int,
    window: TimeWindow,
    reservations: Sequence[ReservationSnapshot] = (),
    maintenance: Sequence[MaintenanceSnapshot] = (),
    exclude_reservation_id: Optional[int] = None,
) -> List[TableSnapshot]:
    """Free tables that can seat the party on their own, in input order"""
    if party_size < 1:
        raise InvalidInputError("Party size must be at least 1")

    availability = find_available_tables(
        tables, window, reservations, maintenance, exclude_reservation_id
    )
    return [table for table in availability.available_tables if table.fits(party_size)]


def suggest_alternative_times(
    tables: Sequence[TableSnapshot],
    party_size: int,
    window: TimeWindow,
    reservations: Sequence[ReservationSnapshot] = (),
    maintenance: Sequence[MaintenanceSnapshot] = (),
    offsets_minutes: Sequence[int] = (-60, -30, 30, 60),
    limit: int = 3,
) -> List[TimeSuggestion]:
    """
    Look for nearby windows on the same day where the party would fit.

    Offsets are tried in the order given; windows that would move onto
    another calendar day are skipped.
    """
    suggestions: List[TimeSuggestion] = []

    for offset in offsets_minutes:
        if offset == 0 or len(suggestions) >= limit:
            continue

        candidate = window.shifted(offset)
        if candidate.start.date() != window.start.date():
            continue

        fitting = filter_candidate_tables(
            tables, party_size, candidate, reservations, maintenance
        )
        if fitting:
            suggestions.append(
                TimeSuggestion(
                    start=candidate.start,
                    end=candidate.end,
                    available_count=len(fitting),
                )
            )

    return suggestions
