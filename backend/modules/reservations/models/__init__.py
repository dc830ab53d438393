from .reservation_models import (
    Reservation,
    ReservationStatus,
    RestaurantSettings,
    ACTIVE_STATUSES,
    COUNTED_STATUSES,
    TERMINAL_STATUSES,
)

__all__ = [
    "Reservation",
    "ReservationStatus",
    "RestaurantSettings",
    "ACTIVE_STATUSES",
    "COUNTED_STATUSES",
    "TERMINAL_STATUSES",
]
