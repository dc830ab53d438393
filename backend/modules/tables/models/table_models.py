# backend/modules/tables/models/table_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Enum as SQLEnum,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from enum import Enum

from core.database import Base
from core.mixins import TimestampMixin


class TableStatus(str, Enum):
    """Table availability status, derived from reservations and maintenance"""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class TableShape(str, Enum):
    """Table shape for visual representation and seating preferences"""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    SQUARE = "square"


class MaintenanceStatus(str, Enum):
    """Maintenance record status"""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Area(Base, TimestampMixin):
    """Dining area (zone) that groups tables"""

    __tablename__ = "areas"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, nullable=False, default=1, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)

    # Bounds on the floor plan, only used by the layout editor
    position_x = Column(Integer)
    position_y = Column(Integer)
    width = Column(Integer)
    height = Column(Integer)

    tables = relationship("Table", back_populates="area")

    def __repr__(self):
        return f"<Area {self.id} - {self.name}>"


class Table(Base, TimestampMixin):
    """Restaurant table configuration"""

    __tablename__ = "tables"

    id = Column(Integer, primary_key=True)
    area_id = Column(Integer, ForeignKey("areas.id"), nullable=True)

    # Basic info
    table_number = Column(String(20), nullable=False)

    # Capacity
    min_capacity = Column(Integer, nullable=False, default=1)
    capacity = Column(Integer, nullable=False)

    # Features
    shape = Column(SQLEnum(TableShape), nullable=True)
    is_accessible = Column(Boolean, nullable=False, default=False)

    # Retired tables stay in place while reservations reference them
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    area = relationship("Area", back_populates="tables")
    maintenance_records = relationship("MaintenanceRecord", back_populates="table")

    __table_args__ = (
        UniqueConstraint("area_id", "table_number", name="uix_table_area_number"),
        CheckConstraint("capacity >= 1", name="chk_table_capacity_positive"),
        CheckConstraint("min_capacity <= capacity", name="chk_table_capacity"),
    )

    @property
    def area_name(self):
        return self.area.name if self.area is not None else None

    def __repr__(self):
        return f"<Table {self.table_number} ({self.min_capacity}-{self.capacity})>"


class MaintenanceRecord(Base, TimestampMixin):
    """Scheduled or ongoing maintenance that takes a table out of service"""

    __tablename__ = "table_maintenance"

    id = Column(Integer, primary_key=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=False)

    scheduled_start = Column(DateTime, nullable=False)
    scheduled_end = Column(DateTime, nullable=False)
    status = Column(
        SQLEnum(MaintenanceStatus), nullable=False, default=MaintenanceStatus.SCHEDULED
    )
    description = Column(Text)

    table = relationship("Table", back_populates="maintenance_records")

    __table_args__ = (
        CheckConstraint(
            "scheduled_end > scheduled_start", name="chk_maintenance_range"
        ),
        Index("idx_maintenance_table_start", "table_id", "scheduled_start"),
    )
