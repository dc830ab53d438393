# backend/modules/reservations/tests/test_reservation_repository.py

import pytest
from datetime import date, time, datetime, timedelta
from sqlalchemy.orm import Session

from core.exceptions import InvalidInputError
from modules.reservations.models.reservation_models import ReservationStatus
from modules.reservations.services.repository import ReservationRepository
from modules.tables.models.table_models import MaintenanceStatus, TableShape
from modules.tables.schemas.table_schemas import TimeWindow
from tests.factories import (
    AreaFactory,
    MaintenanceRecordFactory,
    ReservationFactory,
    RestaurantSettingsFactory,
    TableFactory,
)

FRIDAY = date(2030, 6, 14)


def at(hour, day=FRIDAY):
    return datetime.combine(day, time(hour))


@pytest.fixture
def repository(db_session: Session):
    return ReservationRepository(db_session)


class TestTables:
    """Test table snapshots"""

    def test_snapshot_carries_area_name(self, repository):
        area = AreaFactory(name="Terrace")
        table = TableFactory(
            area=area, capacity=6, min_capacity=2, shape=TableShape.CIRCLE, is_accessible=True
        )

        snapshot = repository.get_table(table.id)

        assert snapshot.area_id == area.id
        assert snapshot.area_name == "Terrace"
        assert snapshot.capacity == 6
        assert snapshot.min_capacity == 2
        assert snapshot.shape == TableShape.CIRCLE
        assert snapshot.is_accessible

    def test_missing_table(self, repository):
        assert repository.get_table(123456) is None

    def test_restaurant_filter(self, repository):
        ours = TableFactory(area=AreaFactory(restaurant_id=1))
        theirs = TableFactory(area=AreaFactory(restaurant_id=2))
        unplaced = TableFactory(area=None)

        ids = [t.id for t in repository.get_tables(restaurant_id=1)]

        assert ours.id in ids
        assert unplaced.id in ids
        assert theirs.id not in ids

    def test_inactive_tables_are_returned(self, repository):
        table = TableFactory(is_active=False)
        snapshot = next(t for t in repository.get_tables() if t.id == table.id)
        assert snapshot.is_active is False


class TestReservations:
    """Test reservation snapshots"""

    def test_date_range_and_status_filter(self, repository):
        table = TableFactory()
        kept = ReservationFactory(table=table, start_time=at(19), end_time=at(21))
        ReservationFactory(
            table=table, start_time=at(12), end_time=at(13),
            status=ReservationStatus.CANCELLED,
        )
        next_week = FRIDAY + timedelta(days=7)
        ReservationFactory(
            table=table, start_time=at(19, next_week), end_time=at(21, next_week)
        )

        result = repository.get_reservations(FRIDAY, FRIDAY)

        assert [r.id for r in result] == [kept.id]
        assert result[0].assigned_table_ids == frozenset({table.id})

    def test_combined_tables_are_kept(self, repository):
        first, second = TableFactory(), TableFactory()
        ReservationFactory(
            table=first, combined_table_ids=[second.id],
            start_time=at(19), end_time=at(21), party_size=10,
        )

        [snapshot] = repository.get_reservations(FRIDAY, FRIDAY)

        assert snapshot.assigned_table_ids == frozenset({first.id, second.id})

    def test_explicit_statuses(self, repository):
        ReservationFactory(start_time=at(19), end_time=at(21), status=ReservationStatus.SEATED)

        assert repository.get_reservations(
            FRIDAY, FRIDAY, statuses=[ReservationStatus.PENDING]
        ) == []

    def test_inverted_range_rejected(self, repository):
        with pytest.raises(InvalidInputError):
            repository.get_reservations(FRIDAY, FRIDAY - timedelta(days=1))


class TestMaintenance:
    """Test maintenance record loading"""

    def test_window_filter(self, repository):
        table = TableFactory()
        overlapping = MaintenanceRecordFactory(
            table=table, scheduled_start=at(18), scheduled_end=at(20)
        )
        MaintenanceRecordFactory(table=table, scheduled_start=at(8), scheduled_end=at(10))
        ongoing = MaintenanceRecordFactory(
            table=table, scheduled_start=at(8), scheduled_end=at(10),
            status=MaintenanceStatus.IN_PROGRESS,
        )
        MaintenanceRecordFactory(
            table=table, scheduled_start=at(19), scheduled_end=at(20),
            status=MaintenanceStatus.COMPLETED,
        )

        window = TimeWindow(start=at(19), end=at(21))
        ids = {m.id for m in repository.get_maintenance_records(window)}

        assert ids == {overlapping.id, ongoing.id}

    def test_without_window_skips_completed(self, repository):
        table = TableFactory()
        scheduled = MaintenanceRecordFactory(table=table)
        MaintenanceRecordFactory(table=table, status=MaintenanceStatus.COMPLETED)

        ids = {m.id for m in repository.get_maintenance_records()}

        assert ids == {scheduled.id}


class TestSettings:
    """Test settings loading"""

    def test_defaults_when_nothing_saved(self, repository):
        settings = repository.get_settings(1)
        assert settings.max_advance_days == 30
        assert settings.timezone == "Europe/Madrid"

    def test_stored_document(self, repository):
        RestaurantSettingsFactory(restaurant_id=7)

        settings = repository.get_settings(7)

        assert settings.max_advance_days == 30
        assert settings.rule_for(FRIDAY).max_reservations == 20

    def test_invalid_document(self, repository):
        RestaurantSettingsFactory(
            restaurant_id=8, data={"reservations": {"maxAdvanceDays": -1}}
        )
        with pytest.raises(InvalidInputError):
            repository.get_settings(8)
