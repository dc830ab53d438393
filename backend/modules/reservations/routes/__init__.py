from fastapi import APIRouter
from .reservation_routes import router as reservation_router

# Create main router
router = APIRouter(prefix="/reservations", tags=["Reservations"])

# Include sub-routers
router.include_router(reservation_router)

__all__ = ["router"]
