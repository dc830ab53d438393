# backend/modules/reservations/services/admission_service.py

"""
Day-level admission control.

Decides whether the restaurant's policy for a calendar day lets another
party in, before any table is looked at. Checks run in a fixed order and
the first failing one is reported.
"""

from datetime import date, datetime, time
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging
import math

from core.exceptions import InvalidInputError
from ..config.engine_config import ReservationEngineConfig, get_engine_config
from ..models.reservation_models import COUNTED_STATUSES
from ..schemas.reservation_schemas import (
    AdmissionDecision,
    AdmissionRejectionReason,
    AdmissionSettings,
    ReservationSnapshot,
    Weekday,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def resolve_now(settings: AdmissionSettings, now: Optional[datetime] = None) -> datetime:
    """
    Wall-clock time in the restaurant's timezone, as a naive datetime.

    Naive values are taken as already local; aware ones are converted.
    """
    if now is not None and now.tzinfo is None:
        return now
    if settings.timezone:
        try:
            zone = ZoneInfo(settings.timezone)
            current = now.astimezone(zone) if now else datetime.now(zone)
            return current.replace(tzinfo=None)
        except ZoneInfoNotFoundError:
            logger.warning(
                f"Unknown restaurant timezone {settings.timezone!r}, using local time"
            )
    if now is not None:
        return now.astimezone().replace(tzinfo=None)
    return datetime.now()


def days_in_advance(requested_date: date, now: datetime) -> int:
    """Whole days, rounded up, from now until the start of the requested day"""
    delta = datetime.combine(requested_date, time.min) - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def _reject(
    reason: AdmissionRejectionReason, message: str, **details
) -> AdmissionDecision:
    logger.info(f"Admission rejected ({reason.value}): {message}")
    return AdmissionDecision(
        allowed=False, reason=reason, message=message, details=details
    )


def check_day_admission(
    requested_date: date,
    party_size: int,
    reservations: Iterable[ReservationSnapshot],
    settings: AdmissionSettings,
    now: Optional[datetime] = None,
    config: Optional[ReservationEngineConfig] = None,
) -> AdmissionDecision:
    """
    Apply the day-level policy to one booking request.

    ``reservations`` may hold any reservations; only the requested day's
    pending and confirmed ones count against the limits.
    """
    if party_size < 1:
        logger.warning(f"Admission check called with party size {party_size}")
        raise InvalidInputError("Party size must be at least 1")

    config = config or get_engine_config()
    now = resolve_now(settings, now)

    if requested_date < now.date():
        return _reject(
            AdmissionRejectionReason.PAST_DATE,
            f"Reservations cannot be made for past dates ({requested_date})",
        )

    weekday = Weekday.from_date(requested_date)
    rule = settings.rule_for(requested_date)
    if rule is None:
        return _reject(
            AdmissionRejectionReason.NO_RULE_DEFINED,
            f"No capacity rules defined for {weekday.value}",
            weekday=weekday.value,
        )
    if not rule.enabled:
        return _reject(
            AdmissionRejectionReason.DAY_CLOSED,
            f"The restaurant is closed on {weekday.value}",
            weekday=weekday.value,
        )

    max_advance_days = settings.max_advance_days
    if max_advance_days is None:
        max_advance_days = config.FALLBACK_MAX_ADVANCE_DAYS

    advance = days_in_advance(requested_date, now)
    if advance > max_advance_days:
        return _reject(
            AdmissionRejectionReason.ADVANCE_WINDOW_EXCEEDED,
            f"Reservations cannot be made more than {max_advance_days} days in advance",
            max_advance_days=max_advance_days,
            days_in_advance=advance,
        )

    max_reservations = rule.max_reservations
    if max_reservations is None:
        max_reservations = config.FALLBACK_MAX_RESERVATIONS
    max_guests_total = rule.max_guests_total
    if max_guests_total is None:
        max_guests_total = config.FALLBACK_MAX_GUESTS_TOTAL

    counted = [
        r for r in reservations
        if r.reservation_date == requested_date and r.status in COUNTED_STATUSES
    ]

    if len(counted) >= max_reservations:
        return _reject(
            AdmissionRejectionReason.MAX_RESERVATIONS_REACHED,
            "No availability for this day, reservation limit reached",
            max_reservations=max_reservations,
            current_reservations=len(counted),
            available_slots=0,
        )

    current_guests = sum(r.party_size for r in counted)
    if current_guests + party_size > max_guests_total:
        return _reject(
            AdmissionRejectionReason.MAX_GUESTS_REACHED,
            "No availability for this day, guest limit reached",
            max_guests_total=max_guests_total,
            current_guests=current_guests,
            requested_guests=party_size,
            available_guests=max_guests_total - current_guests,
        )

    logger.info(
        f"Admission allowed for {requested_date} ({weekday.value}): party of "
        f"{party_size}, {len(counted) + 1}/{max_reservations} reservations, "
        f"{current_guests + party_size}/{max_guests_total} guests"
    )
    return AdmissionDecision(
        allowed=True,
        details={
            "max_reservations": max_reservations,
            "current_reservations": len(counted),
            "max_guests_total": max_guests_total,
            "current_guests": current_guests,
        },
    )
