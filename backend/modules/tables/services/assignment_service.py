# backend/modules/tables/services/assignment_service.py

"""
Table scoring, single-table assignment and the multi-table combination
search used for parties no single table can seat.
"""

from typing import Iterator, List, Optional, Sequence, Tuple
import logging

from core.exceptions import InvalidInputError
from modules.reservations.schemas.reservation_schemas import ReservationSnapshot
from ..schemas.table_schemas import (
    AssignmentResult,
    MaintenanceSnapshot,
    ScoreBreakdown,
    TablePreferences,
    TableScore,
    TableSnapshot,
    TimeWindow,
)
from .availability_service import filter_candidate_tables, find_available_tables

logger = logging.getLogger(__name__)

# Score weights, summing to 100
CAPACITY_WEIGHT = 40
AREA_WEIGHT = 30
SHAPE_WEIGHT = 10
LOCATION_WEIGHT = 10
ACCESSIBILITY_WEIGHT = 10

NO_TABLES_AVAILABLE = "no tables available"


def _location_matches(table: TableSnapshot, location: Optional[str]) -> bool:
    if not location or not table.area_name:
        return False
    return location.lower() in table.area_name.lower()


def score_table(
    table: TableSnapshot,
    party_size: int,
    preferences: Optional[TablePreferences] = None,
) -> TableScore:
    """
    Score how well a table suits a party.

    Capacity fit rewards tables that waste fewer seats; the remaining
    components each add their full weight when the preference is set and
    met. Unset preferences contribute nothing, so scores stay comparable
    across tables for the same request.
    """
    if not table.fits(party_size):
        raise InvalidInputError(
            f"Table {table.id} seats {table.min_capacity}-{table.capacity}, "
            f"cannot score it for a party of {party_size}"
        )

    preferences = preferences or TablePreferences()

    capacity_fit = 1 - (table.capacity - party_size) / table.capacity
    area_match = preferences.area_id is not None and table.area_id == preferences.area_id
    shape_match = preferences.shape is not None and table.shape == preferences.shape
    location_match = _location_matches(table, preferences.location)
    accessibility = preferences.is_accessible and table.is_accessible

    score = (
        capacity_fit * CAPACITY_WEIGHT
        + (AREA_WEIGHT if area_match else 0)
        + (SHAPE_WEIGHT if shape_match else 0)
        + (LOCATION_WEIGHT if location_match else 0)
        + (ACCESSIBILITY_WEIGHT if accessibility else 0)
    )

    breakdown = ScoreBreakdown(
        capacity_fit=round(capacity_fit * 100),
        area_match=100 if area_match else 0,
        shape_match=100 if shape_match else 0,
        location_match=100 if location_match else 0,
        accessibility=100 if accessibility else 0,
    )

    return TableScore(table=table, score=score, breakdown=breakdown)


def rank_tables(
    tables: Sequence[TableSnapshot],
    party_size: int,
    preferences: Optional[TablePreferences] = None,
) -> List[TableScore]:
    # sorted() is stable: equal scores keep the candidate order
    scores = [score_table(table, party_size, preferences) for table in tables]
    return sorted(scores, key=lambda s: s.score, reverse=True)


def assign_best_table(
    tables: Sequence[TableSnapshot],
    party_size: int,
    window: TimeWindow,
    preferences: Optional[TablePreferences] = None,
    reservations: Sequence[ReservationSnapshot] = (),
    maintenance: Sequence[MaintenanceSnapshot] = (),
    alternatives_count: int = 2,
    exclude_reservation_id: Optional[int] = None,
) -> AssignmentResult:
    """Pick the best free table for the party; a miss is not an error"""
    candidates = filter_candidate_tables(
        tables, party_size, window, reservations, maintenance, exclude_reservation_id
    )

    if not candidates:
        logger.info(
            f"No single table for party of {party_size} at "
            f"{window.start:%Y-%m-%d %H:%M}"
        )
        return AssignmentResult(assigned=False, reason=NO_TABLES_AVAILABLE)

    ranked = rank_tables(candidates, party_size, preferences)
    best = ranked[0]

    logger.info(
        f"Assigned table {best.table.id} to party of {party_size} "
        f"(score {best.score:.1f}, {len(candidates)} candidates)"
    )

    return AssignmentResult(
        assigned=True,
        table=best.table,
        score=best.score,
        breakdown=best.breakdown,
        alternatives=[s.table for s in ranked[1:1 + alternatives_count]],
    )


def _search_combinations(
    tables: Sequence[TableSnapshot],
    remaining: int,
    start: int,
    prefix: Tuple[TableSnapshot, ...],
    max_tables: int,
) -> Iterator[Tuple[TableSnapshot, ...]]:
    if len(prefix) >= max_tables:
        return

    for index in range(start, len(tables)):
        table = tables[index]
        combination = prefix + (table,)

        if table.capacity >= remaining:
            yield combination
        elif len(combination) < max_tables:
            yield from _search_combinations(
                tables, remaining - table.capacity, index + 1, combination, max_tables
            )


def find_table_combinations(
    tables: Sequence[TableSnapshot],
    party_size: int,
    max_tables: int = 3,
    limit: int = 3,
) -> List[List[TableSnapshot]]:
    """
    Find sets of tables whose combined capacity seats the party.

    Tables are tried in the given order and each set lists its tables in
    that order. A table large enough for what is left closes the set, so
    no set carries a table it does not need at its end. A table that could
    hold the whole party but is too large for it (``min_capacity`` above
    the party size) is left out. Results are ordered by table count,
    fewest first, and capped at ``limit``. Adjacency and preferences are
    not considered.
    """
    if party_size < 1:
        raise InvalidInputError("Party size must be at least 1")
    if max_tables < 1:
        raise InvalidInputError("max_tables must be at least 1")

    usable = [
        table for table in tables
        if table.capacity > 0
        and (table.capacity < party_size or table.fits(party_size))
    ]
    found = list(_search_combinations(usable, party_size, 0, (), max_tables))
    found.sort(key=len)

    return [list(combination) for combination in found[:limit]]


def assign_table_combination(
    tables: Sequence[TableSnapshot],
    party_size: int,
    window: TimeWindow,
    reservations: Sequence[ReservationSnapshot] = (),
    maintenance: Sequence[MaintenanceSnapshot] = (),
    max_tables: int = 3,
    limit: int = 3,
) -> List[List[TableSnapshot]]:
    """Combination search restricted to tables free for the window"""
    available = find_available_tables(tables, window, reservations, maintenance)
    combinations = find_table_combinations(
        available.available_tables, party_size, max_tables, limit
    )

    logger.info(
        f"Found {len(combinations)} table combinations for party of {party_size} "
        f"from {available.available_count} free tables"
    )
    return combinations
