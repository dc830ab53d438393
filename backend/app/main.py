from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_logging, run_startup_checks

# ========== Table Assignment ==========
from modules.tables.routers.table_assignment_router import router as table_assignment_router

# ========== Reservations ==========
from modules.reservations.routes import router as reservations_router


def create_app() -> FastAPI:
    """Build the API application with its routers and error handlers."""
    configure_logging()

    app = FastAPI(
        title="Reservation Engine API",
        description="""
    Admission control and table assignment for restaurant bookings.

    ## Features

    * **Admission** - Day-level limits: booking horizon, closed days, reservation and guest caps
    * **Availability** - Conflict-free tables for a time window, including maintenance
    * **Assignment** - Best-fit table ranking with seating preferences
    * **Combinations** - Joined tables for parties no single table can seat
    * **Status rules** - Allowed reservation and table status changes

    All endpoints evaluate requests; none of them store bookings.
    """,
        version="1.0.0",
        debug=settings.debug,
    )

    # Register exception handlers for consistent error responses
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(table_assignment_router, prefix=settings.api_prefix)
    app.include_router(reservations_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def startup_event():
        run_startup_checks()

    @app.get("/")
    def read_root():
        return {"message": "Reservation engine is running"}

    return app


app = create_app()
