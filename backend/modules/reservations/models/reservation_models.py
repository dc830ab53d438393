# backend/modules/reservations/models/reservation_models.py

"""
Reservation and restaurant settings models read by the admission engine.
"""

from sqlalchemy import (
    Column, Integer, DateTime, ForeignKey, Date, Text, Enum, JSON, Index
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, LifecycleTimestampsMixin
import enum

# Registers Table/Area with the mapper before the relationship below resolves
from modules.tables.models.table_models import Table  # noqa: F401


class ReservationStatus(str, enum.Enum):
    """Reservation status enum"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that hold a table for their time range
ACTIVE_STATUSES = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.SEATED}
)

# Statuses counted against the per-day limits
COUNTED_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})

TERMINAL_STATUSES = frozenset(
    {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}
)


class Reservation(Base, TimestampMixin, LifecycleTimestampsMixin):
    """Reservation for one party on one day"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, nullable=False, index=True)

    # Table assignment, nullable until assigned
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=True)
    combined_table_ids = Column(JSON, default=list)  # Extra tables joined for large parties

    # Reservation details
    reservation_date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    party_size = Column(Integer, nullable=False)

    # Status and tracking
    status = Column(Enum(ReservationStatus), default=ReservationStatus.PENDING, index=True)
    special_requests = Column(Text)
    cancellation_reason = Column(Text)

    # Relationships
    table = relationship("Table")

    __table_args__ = (
        Index('idx_reservation_date_status', 'reservation_date', 'status'),
        Index('idx_reservation_table_start', 'table_id', 'start_time'),
    )

    def __repr__(self):
        return f"<Reservation {self.id} - {self.customer_id} on {self.reservation_date} at {self.start_time}>"


class RestaurantSettings(Base, TimestampMixin):
    """Restaurant-wide reservation settings stored as one JSON document"""
    __tablename__ = "restaurant_settings"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, nullable=False, unique=True, default=1)

    # Validated into AdmissionSettings before the engine sees it
    data = Column(JSON, nullable=False, default=dict)
