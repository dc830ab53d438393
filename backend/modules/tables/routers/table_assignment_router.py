# backend/modules/tables/routers/table_assignment_router.py

from typing import Optional
from fastapi import APIRouter, Depends, Query
from datetime import datetime, timedelta

from core.config import settings as app_settings
from core.exceptions import NotFoundError
from modules.reservations.config.engine_config import get_engine_config
from modules.reservations.routes.dependencies import get_repository
from modules.reservations.services.admission_service import resolve_now
from modules.reservations.services.repository import ReservationRepository
from ..schemas.table_schemas import (
    AssignTableRequest,
    AssignmentResult,
    AvailabilityRequest,
    AvailabilityResult,
    CombinationRequest,
    CombinationResponse,
    MultiDateAvailabilityRequest,
    MultiDateAvailabilityResponse,
    TableStatusView,
    TimeWindow,
    WindowRequest,
)
from ..services.availability_service import (
    build_window,
    find_available_tables,
    find_multi_date_availability,
)
from ..services.assignment_service import assign_best_table, assign_table_combination
from ..services.table_state_service import derive_table_status

router = APIRouter(prefix="/tables", tags=["Table Assignment"])


def _window_for(request: WindowRequest) -> TimeWindow:
    duration = request.duration_minutes
    if request.end_time is None and duration is None:
        duration = get_engine_config().DEFAULT_DURATION_MINUTES
    return build_window(
        request.reservation_date,
        request.start_time,
        end_time=request.end_time,
        duration_minutes=duration,
    )


def _reservations_around(repository: ReservationRepository, window: TimeWindow):
    return repository.get_reservations(
        window.start.date() - timedelta(days=1), window.end.date()
    )


@router.post("/availability", response_model=AvailabilityResult)
async def check_availability(
    request: AvailabilityRequest,
    restaurant_id: Optional[int] = Query(None),
    repository: ReservationRepository = Depends(get_repository),
):
    """
    Get the tables that are free for a time window

    Only active tables are listed and counted.
    """
    window = _window_for(request)
    tables = repository.get_tables(restaurant_id)
    if request.table_ids:
        wanted = set(request.table_ids)
        tables = [t for t in tables if t.id in wanted]

    return find_available_tables(
        tables,
        window,
        _reservations_around(repository, window),
        repository.get_maintenance_records(window),
    )


@router.post("/availability/multi-date", response_model=MultiDateAvailabilityResponse)
async def check_multi_date_availability(
    request: MultiDateAvailabilityRequest,
    restaurant_id: Optional[int] = Query(None),
    repository: ReservationRepository = Depends(get_repository),
):
    """Get availability for the same time slot on several days"""
    first, last = min(request.dates), max(request.dates)
    reservations = repository.get_reservations(first - timedelta(days=1), last + timedelta(days=1))
    # Unwindowed: every record that is not completed
    maintenance = repository.get_maintenance_records()

    results = find_multi_date_availability(
        repository.get_tables(restaurant_id),
        request.dates,
        request.start_time,
        request.duration_minutes,
        reservations,
        maintenance,
    )
    return MultiDateAvailabilityResponse(results=results)


@router.post("/assign", response_model=AssignmentResult)
async def assign_table(
    request: AssignTableRequest,
    restaurant_id: Optional[int] = Query(None),
    repository: ReservationRepository = Depends(get_repository),
):
    """
    Pick the best free table for a party

    Returns ``assigned`` false with a reason when no single table fits.
    """
    window = _window_for(request)
    return assign_best_table(
        repository.get_tables(restaurant_id),
        request.party_size,
        window,
        request.preferences,
        _reservations_around(repository, window),
        repository.get_maintenance_records(window),
        alternatives_count=get_engine_config().ALTERNATIVES_COUNT,
    )


@router.post("/combinations", response_model=CombinationResponse)
async def find_combinations(
    request: CombinationRequest,
    restaurant_id: Optional[int] = Query(None),
    repository: ReservationRepository = Depends(get_repository),
):
    """Find sets of free tables that together seat a large party"""
    config = get_engine_config()
    window = _window_for(request)
    combinations = assign_table_combination(
        repository.get_tables(restaurant_id),
        request.party_size,
        window,
        _reservations_around(repository, window),
        repository.get_maintenance_records(window),
        max_tables=request.max_tables or config.MAX_COMBINATION_TABLES,
        limit=config.MAX_COMBINATIONS_RETURNED,
    )
    return CombinationResponse(party_size=request.party_size, combinations=combinations)


@router.get("/{table_id}/status", response_model=TableStatusView)
async def get_table_status(
    table_id: int,
    at: Optional[datetime] = Query(None, description="Defaults to now"),
    restaurant_id: Optional[int] = Query(None),
    repository: ReservationRepository = Depends(get_repository),
):
    """
    Get a table's status at an instant, derived from bookings and maintenance.

    An ``at`` with a UTC offset is converted to the restaurant's local time.
    """
    if repository.get_table(table_id) is None:
        raise NotFoundError(f"Table {table_id} not found")

    settings = repository.get_settings(restaurant_id or app_settings.default_restaurant_id)
    at = resolve_now(settings, at)
    instant = TimeWindow(start=at, end=at + timedelta(minutes=1))
    status = derive_table_status(
        table_id,
        at,
        _reservations_around(repository, instant),
        repository.get_maintenance_records(instant),
    )
    return TableStatusView(table_id=table_id, status=status, at=at)
