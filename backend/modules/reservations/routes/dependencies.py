# backend/modules/reservations/routes/dependencies.py

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from ..services.repository import ReservationRepository
from ..services.booking_service import BookingService


def get_repository(db: Session = Depends(get_db)) -> ReservationRepository:
    return ReservationRepository(db)


def get_booking_service(
    repository: ReservationRepository = Depends(get_repository),
) -> BookingService:
    return BookingService(repository)
