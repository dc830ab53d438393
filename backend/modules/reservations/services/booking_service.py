# backend/modules/reservations/services/booking_service.py

"""
Booking evaluation: admission, then table assignment, for one request.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence
import logging

from core.exceptions import NotFoundError
from modules.tables.schemas.table_schemas import (
    AssignmentResult,
    MaintenanceSnapshot,
    TablePreferences,
    TableSnapshot,
    TimeSuggestion,
    TimeWindow,
)
from modules.tables.services.availability_service import (
    build_window,
    is_table_free,
    suggest_alternative_times,
)
from modules.tables.services.assignment_service import (
    assign_best_table,
    assign_table_combination,
    score_table,
)
from ..config.engine_config import ReservationEngineConfig, get_engine_config
from ..models.reservation_models import ReservationStatus
from ..schemas.reservation_schemas import (
    AdmissionDecision,
    AdmissionSettings,
    BookingDecision,
    BookingRequest,
    ReservationSnapshot,
)
from .admission_service import check_day_admission, resolve_now
from .repository import ReservationRepository

logger = logging.getLogger(__name__)


class BookingService:
    """
    Decides whether a booking request can be accepted and on which tables.

    The service only reads. Callers that persist the result must run
    ``evaluate`` and the insert inside one transaction (or hold a lock on
    the affected tables), otherwise two requests may be given the same
    table.
    """

    def __init__(
        self,
        repository: ReservationRepository,
        config: Optional[ReservationEngineConfig] = None,
    ):
        self.repository = repository
        self.config = config or get_engine_config()

    def evaluate(
        self, request: BookingRequest, now: Optional[datetime] = None
    ) -> BookingDecision:
        settings = self.repository.get_settings(request.restaurant_id)
        now = resolve_now(settings, now)

        window = self._build_window(request, settings)

        # The day before is included for windows that run past midnight
        reservations = self.repository.get_reservations(
            window.start.date() - timedelta(days=1), window.end.date()
        )

        admission = check_day_admission(
            request.reservation_date,
            request.party_size,
            reservations,
            settings,
            now=now,
            config=self.config,
        )
        if not admission.allowed:
            return BookingDecision(
                accepted=False,
                admission=admission,
                window=window,
                reason=admission.message,
            )

        tables = self.repository.get_tables(request.restaurant_id)
        maintenance = self.repository.get_maintenance_records(window)
        initial_status = (
            ReservationStatus.CONFIRMED if settings.auto_confirm else ReservationStatus.PENDING
        )

        if request.table_id is not None:
            return self._evaluate_requested_table(
                request, settings, window, tables, reservations, maintenance,
                admission, initial_status,
            )

        preferences = self._preferences_for(request, settings)
        assignment = assign_best_table(
            tables,
            request.party_size,
            window,
            preferences,
            reservations,
            maintenance,
            alternatives_count=self.config.ALTERNATIVES_COUNT,
        )

        if assignment.assigned:
            return BookingDecision(
                accepted=True,
                admission=admission,
                window=window,
                table_ids=[assignment.table.id],
                assignment=assignment,
                initial_status=initial_status,
            )

        if not any(t.is_active and t.fits(request.party_size) for t in tables):
            combinations = assign_table_combination(
                tables,
                request.party_size,
                window,
                reservations,
                maintenance,
                max_tables=self.config.MAX_COMBINATION_TABLES,
                limit=self.config.MAX_COMBINATIONS_RETURNED,
            )
            if combinations:
                return BookingDecision(
                    accepted=True,
                    admission=admission,
                    window=window,
                    table_ids=[t.id for t in combinations[0]],
                    assignment=assignment,
                    combinations=combinations,
                    initial_status=initial_status,
                )

        return BookingDecision(
            accepted=False,
            admission=admission,
            window=window,
            assignment=assignment,
            reason=assignment.reason,
            suggestions=self._suggest(
                tables, request.party_size, window, reservations, maintenance
            ),
        )

    def _build_window(
        self, request: BookingRequest, settings: AdmissionSettings
    ) -> TimeWindow:
        duration = request.duration_minutes
        if request.end_time is None and duration is None:
            duration = settings.default_duration_minutes or self.config.DEFAULT_DURATION_MINUTES
        return build_window(
            request.reservation_date,
            request.start_time,
            end_time=request.end_time,
            duration_minutes=duration,
        )

    def _preferences_for(
        self, request: BookingRequest, settings: AdmissionSettings
    ) -> TablePreferences:
        preferences = request.preferences
        if preferences.location is None and settings.default_preferred_location:
            preferences = TablePreferences(
                **preferences.model_dump(exclude={"location"}),
                location=settings.default_preferred_location,
            )
        return preferences

    def _evaluate_requested_table(
        self,
        request: BookingRequest,
        settings: AdmissionSettings,
        window: TimeWindow,
        tables: Sequence[TableSnapshot],
        reservations: Sequence[ReservationSnapshot],
        maintenance: Sequence[MaintenanceSnapshot],
        admission: AdmissionDecision,
        initial_status: ReservationStatus,
    ) -> BookingDecision:
        table = next((t for t in tables if t.id == request.table_id), None)
        if table is None:
            table = self.repository.get_table(request.table_id)
        if table is None:
            raise NotFoundError(f"Table {request.table_id} not found")

        def reject(reason: str) -> BookingDecision:
            logger.info(f"Requested table {table.id} rejected: {reason}")
            return BookingDecision(
                accepted=False,
                admission=admission,
                window=window,
                reason=reason,
                suggestions=self._suggest(
                    tables, request.party_size, window, reservations, maintenance
                ),
            )

        if not table.is_active:
            return reject(f"Table {table.id} is not in service")
        if not table.fits(request.party_size):
            return reject(
                f"Table {table.id} seats {table.min_capacity}-{table.capacity} guests"
            )
        if not is_table_free(table.id, window, reservations, maintenance):
            return reject(f"Table {table.id} is already booked for this time slot")

        scored = score_table(
            table, request.party_size, self._preferences_for(request, settings)
        )
        return BookingDecision(
            accepted=True,
            admission=admission,
            window=window,
            table_ids=[table.id],
            assignment=AssignmentResult(
                assigned=True,
                table=table,
                score=scored.score,
                breakdown=scored.breakdown,
            ),
            initial_status=initial_status,
        )

    def _suggest(
        self,
        tables: Sequence[TableSnapshot],
        party_size: int,
        window: TimeWindow,
        reservations: Sequence[ReservationSnapshot],
        maintenance: Sequence[MaintenanceSnapshot],
    ) -> List[TimeSuggestion]:
        """
        Nearby same-day windows where the party could be seated.

        Parties no single active table can hold are checked against table
        combinations; ``available_count`` then counts combinations found.
        """
        # Maintenance was loaded for the original window only
        widest = max(abs(offset) for offset in self.config.SUGGESTION_OFFSETS_MINUTES or [0])
        if widest:
            maintenance = self.repository.get_maintenance_records(
                TimeWindow(
                    start=window.start - timedelta(minutes=widest),
                    end=window.end + timedelta(minutes=widest),
                )
            )
        if any(t.is_active and t.fits(party_size) for t in tables):
            return suggest_alternative_times(
                tables,
                party_size,
                window,
                reservations,
                maintenance,
                offsets_minutes=self.config.SUGGESTION_OFFSETS_MINUTES,
                limit=self.config.MAX_SUGGESTIONS,
            )

        suggestions: List[TimeSuggestion] = []
        for offset in self.config.SUGGESTION_OFFSETS_MINUTES:
            if offset == 0 or len(suggestions) >= self.config.MAX_SUGGESTIONS:
                continue
            candidate = window.shifted(offset)
            if candidate.start.date() != window.start.date():
                continue
            combinations = assign_table_combination(
                tables,
                party_size,
                candidate,
                reservations,
                maintenance,
                max_tables=self.config.MAX_COMBINATION_TABLES,
                limit=self.config.MAX_COMBINATIONS_RETURNED,
            )
            if combinations:
                suggestions.append(
                    TimeSuggestion(
                        start=candidate.start,
                        end=candidate.end,
                        available_count=len(combinations),
                    )
                )
        return suggestions
