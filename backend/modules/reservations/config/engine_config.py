# backend/modules/reservations/config/engine_config.py

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReservationEngineConfig(BaseSettings):
    """
    Tunables for admission control and table assignment.

    The restaurant's own rules live in its settings record; these are the
    engine-wide defaults used when a record leaves a value unset.
    """

    model_config = SettingsConfigDict(env_prefix="RESERVATION_", case_sensitive=False)

    # Length of a booking when the request only gives a start time
    DEFAULT_DURATION_MINUTES: int = Field(default=120, gt=0)

    # Combination search depth; bounds worst-case search time
    MAX_COMBINATION_TABLES: int = Field(default=3, ge=1, le=6)
    MAX_COMBINATIONS_RETURNED: int = Field(default=3, ge=1)

    # Ranked runner-up tables returned next to the best match
    ALTERNATIVES_COUNT: int = Field(default=2, ge=0)

    # Offsets (minutes) tried when suggesting another time on the same day,
    # given as a JSON list in the environment
    SUGGESTION_OFFSETS_MINUTES: List[int] = [-60, -30, 30, 60]
    MAX_SUGGESTIONS: int = Field(default=3, ge=0)

    # Fallbacks when a settings record exists but omits a limit
    FALLBACK_MAX_ADVANCE_DAYS: int = Field(default=365, ge=0)
    FALLBACK_MAX_RESERVATIONS: int = Field(default=50, ge=1)
    FALLBACK_MAX_GUESTS_TOTAL: int = Field(default=100, ge=1)


# Global instance
engine_config = ReservationEngineConfig()


def get_engine_config() -> ReservationEngineConfig:
    """Get the reservation engine configuration."""
    return engine_config
