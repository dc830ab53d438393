from .admission_service import check_day_admission
from .reservation_state_service import (
    RESERVATION_TRANSITIONS,
    can_transition_reservation,
    transition_reservation,
)
from .repository import ReservationRepository
from .booking_service import BookingService

__all__ = [
    "check_day_admission",
    "RESERVATION_TRANSITIONS",
    "can_transition_reservation",
    "transition_reservation",
    "ReservationRepository",
    "BookingService",
]
