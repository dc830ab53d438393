# backend/tests/factories/__init__.py

"""
Shared test factories for the reservation engine.

These factories write through the session of the db_session fixture.
"""

from .base import BaseFactory, bind_session
from .tables import AreaFactory, TableFactory, MaintenanceRecordFactory
from .reservations import ReservationFactory, RestaurantSettingsFactory
from .utils import create_floor

__all__ = [
    # Base
    'BaseFactory',
    'bind_session',

    # Tables
    'AreaFactory',
    'TableFactory',
    'MaintenanceRecordFactory',

    # Reservations
    'ReservationFactory',
    'RestaurantSettingsFactory',

    # Scenarios
    'create_floor',
]
