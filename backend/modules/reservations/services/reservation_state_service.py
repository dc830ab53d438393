# backend/modules/reservations/services/reservation_state_service.py

from datetime import datetime
from typing import Dict, FrozenSet, Optional
import logging

from core.exceptions import InvalidInputError, InvalidTransitionError
from ..models.reservation_models import ReservationStatus
from ..schemas.reservation_schemas import ReservationSnapshot

logger = logging.getLogger(__name__)


RESERVATION_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({
        ReservationStatus.CONFIRMED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.CONFIRMED: frozenset({
        ReservationStatus.SEATED,
        ReservationStatus.CANCELLED,
        ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.SEATED: frozenset({
        ReservationStatus.COMPLETED,
        ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.NO_SHOW: frozenset(),
}

# Timestamp field stamped when a reservation enters each status
TRANSITION_TIMESTAMPS = {
    ReservationStatus.CONFIRMED: "confirmed_at",
    ReservationStatus.SEATED: "seated_at",
    ReservationStatus.COMPLETED: "completed_at",
    ReservationStatus.CANCELLED: "cancelled_at",
    ReservationStatus.NO_SHOW: "no_show_at",
}


def can_transition_reservation(
    from_status: ReservationStatus, to_status: ReservationStatus
) -> bool:
    """Check whether a reservation may move between two statuses"""
    allowed = RESERVATION_TRANSITIONS.get(ReservationStatus(from_status), frozenset())
    return ReservationStatus(to_status) in allowed


def transition_reservation(
    reservation: ReservationSnapshot,
    to_status: ReservationStatus,
    reason: Optional[str] = None,
    at: Optional[datetime] = None,
) -> ReservationSnapshot:
    """
    Return a copy of the reservation moved to ``to_status``.

    The entry timestamp for the new status is set to ``at`` (now by
    default). Cancelling requires a reason, which is kept on the copy.
    The input snapshot is never modified.
    """
    to_status = ReservationStatus(to_status)

    if not can_transition_reservation(reservation.status, to_status):
        logger.warning(
            f"Rejected transition of reservation {reservation.id}: "
            f"{reservation.status.value} -> {to_status.value}"
        )
        raise InvalidTransitionError(
            reservation.status, to_status, entity="reservation status"
        )

    if to_status == ReservationStatus.CANCELLED and not (reason and reason.strip()):
        raise InvalidInputError("A cancellation reason is required")

    update = {
        "status": to_status,
        TRANSITION_TIMESTAMPS[to_status]: at or datetime.now(),
    }
    if to_status == ReservationStatus.CANCELLED:
        update["cancellation_reason"] = reason.strip()

    logger.info(
        f"Reservation {reservation.id} {reservation.status.value} -> {to_status.value}"
    )
    return reservation.model_copy(update=update)
