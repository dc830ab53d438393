# backend/modules/reservations/routes/reservation_routes.py

"""
Reservation admission and booking evaluation routes.

Every endpoint here is read-only: it reports what would happen to a
booking, it does not store one.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from datetime import datetime
import logging

from ..models.reservation_models import ReservationStatus, COUNTED_STATUSES
from ..schemas.reservation_schemas import (
    AdmissionDecision,
    AdmissionRequest,
    BookingDecision,
    BookingRequest,
    TransitionCheckResponse,
)
from ..services.admission_service import check_day_admission
from ..services.booking_service import BookingService
from ..services.repository import ReservationRepository
from ..services.reservation_state_service import can_transition_reservation
from .dependencies import get_booking_service, get_repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/admission", response_model=AdmissionDecision)
async def check_admission(
    request: AdmissionRequest,
    now: Optional[datetime] = Query(None, description="Evaluate as of this time"),
    repository: ReservationRepository = Depends(get_repository),
):
    """
    Check the restaurant's day-level limits for a party.

    A rejection is returned as a normal response with ``allowed`` false.
    """
    settings = repository.get_settings(request.restaurant_id)
    reservations = repository.get_reservations(
        request.reservation_date, request.reservation_date, statuses=COUNTED_STATUSES
    )
    return check_day_admission(
        request.reservation_date,
        request.party_size,
        reservations,
        settings,
        now=now,
    )


@router.post("/evaluate", response_model=BookingDecision)
async def evaluate_booking(
    request: BookingRequest,
    now: Optional[datetime] = Query(None, description="Evaluate as of this time"),
    service: BookingService = Depends(get_booking_service),
):
    """
    Run admission and table assignment for a booking request.

    - Rejects days that are closed, full or outside the booking horizon
    - Checks a requested table, or picks the best free one
    - Falls back to joining tables for large parties
    - Suggests nearby times when nothing fits
    """
    decision = service.evaluate(request, now=now)
    logger.info(
        f"Booking evaluated for {request.reservation_date} {request.start_time}, "
        f"party of {request.party_size}: accepted={decision.accepted}"
    )
    return decision


@router.get("/transitions", response_model=TransitionCheckResponse)
async def check_transition(
    from_status: ReservationStatus = Query(...),
    to_status: ReservationStatus = Query(...),
):
    """Check whether a reservation may move from one status to another"""
    return TransitionCheckResponse(
        from_status=from_status.value,
        to_status=to_status.value,
        allowed=can_transition_reservation(from_status, to_status),
    )
