# backend/modules/reservations/services/repository.py

"""
Read adapter between the database and the reservation engine.

Loads ORM rows and hands back validated snapshots; nothing here writes.
"""

from datetime import date
from typing import Iterable, List, Optional
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from core.exceptions import InvalidInputError
from modules.tables.models.table_models import (
    Area, Table, MaintenanceRecord, MaintenanceStatus
)
from modules.tables.schemas.table_schemas import (
    TableSnapshot, MaintenanceSnapshot, TimeWindow
)
from ..models.reservation_models import (
    Reservation, ReservationStatus, RestaurantSettings, ACTIVE_STATUSES
)
from ..schemas.reservation_schemas import (
    AdmissionSettings, ReservationSnapshot, default_admission_settings
)

logger = logging.getLogger(__name__)


class ReservationRepository:
    """Snapshot queries used by the booking service and the API"""

    def __init__(self, db: Session):
        self.db = db

    def get_tables(self, restaurant_id: Optional[int] = None) -> List[TableSnapshot]:
        """All tables, active or not, optionally limited to one restaurant"""
        query = self.db.query(Table).options(joinedload(Table.area))

        if restaurant_id is not None:
            # Tables not yet placed in an area belong to every restaurant's pool
            query = query.outerjoin(Area, Table.area_id == Area.id).filter(
                or_(Area.restaurant_id == restaurant_id, Table.area_id.is_(None))
            )

        tables = query.order_by(Table.id).all()
        return [TableSnapshot.model_validate(table) for table in tables]

    def get_table(self, table_id: int) -> Optional[TableSnapshot]:
        table = (
            self.db.query(Table)
            .options(joinedload(Table.area))
            .filter(Table.id == table_id)
            .first()
        )
        return TableSnapshot.model_validate(table) if table else None

    def get_reservations(
        self,
        date_from: date,
        date_to: date,
        statuses: Iterable[ReservationStatus] = ACTIVE_STATUSES,
    ) -> List[ReservationSnapshot]:
        """Reservations whose day falls within [date_from, date_to]"""
        if date_to < date_from:
            raise InvalidInputError("date_to must not be before date_from")

        reservations = (
            self.db.query(Reservation)
            .filter(
                and_(
                    Reservation.reservation_date >= date_from,
                    Reservation.reservation_date <= date_to,
                    Reservation.status.in_(list(statuses)),
                )
            )
            .order_by(Reservation.start_time, Reservation.id)
            .all()
        )
        return [ReservationSnapshot.model_validate(r) for r in reservations]

    def get_maintenance_records(
        self, window: Optional[TimeWindow] = None
    ) -> List[MaintenanceSnapshot]:
        """
        Maintenance that could block a table.

        Ongoing work is always returned; scheduled work only when it
        overlaps the window (or always, without a window). Completed
        records are never returned.
        """
        query = self.db.query(MaintenanceRecord)

        if window is None:
            query = query.filter(
                MaintenanceRecord.status != MaintenanceStatus.COMPLETED
            )
        else:
            query = query.filter(
                or_(
                    MaintenanceRecord.status == MaintenanceStatus.IN_PROGRESS,
                    and_(
                        MaintenanceRecord.status == MaintenanceStatus.SCHEDULED,
                        MaintenanceRecord.scheduled_start < window.end,
                        MaintenanceRecord.scheduled_end > window.start,
                    ),
                )
            )

        records = query.order_by(MaintenanceRecord.scheduled_start).all()
        return [MaintenanceSnapshot.model_validate(record) for record in records]

    def get_settings(self, restaurant_id: int) -> AdmissionSettings:
        """Typed admission settings, or the built-in defaults if none are saved"""
        record = (
            self.db.query(RestaurantSettings)
            .filter(RestaurantSettings.restaurant_id == restaurant_id)
            .first()
        )

        if record is None:
            logger.debug(f"No settings saved for restaurant {restaurant_id}, using defaults")
            return default_admission_settings()

        try:
            return AdmissionSettings.model_validate(record.data or {})
        except PydanticValidationError as e:
            logger.error(f"Invalid settings for restaurant {restaurant_id}: {e}")
            raise InvalidInputError(
                f"Stored settings for restaurant {restaurant_id} are invalid"
            )
