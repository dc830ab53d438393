# backend/modules/reservations/tests/test_admission_service.py

"""
Tests for day-level admission control.
"""

import pytest
from datetime import date, time, datetime, timedelta, timezone

from core.exceptions import InvalidInputError
from modules.reservations.models.reservation_models import ReservationStatus
from modules.reservations.schemas.reservation_schemas import (
    AdmissionRejectionReason,
    AdmissionSettings,
    ReservationSnapshot,
    Weekday,
    WeekdayRule,
    default_admission_settings,
)
from modules.reservations.services.admission_service import (
    check_day_admission,
    days_in_advance,
    resolve_now,
)

FRIDAY = date(2030, 6, 14)
NOW = datetime(2030, 6, 10, 12, 0)


def existing(party_size, status=ReservationStatus.CONFIRMED, day=FRIDAY):
    start = datetime.combine(day, time(19))
    return ReservationSnapshot(
        reservation_date=day,
        start_time=start,
        end_time=start + timedelta(hours=2),
        party_size=party_size,
        status=status,
    )


def friday_only(**rule):
    return AdmissionSettings(
        max_advance_days=30,
        weekday_rules={Weekday.FRIDAY: WeekdayRule(**rule)},
    )


class TestCheckDayAdmission:
    """Test admission checks in order"""

    def test_reservation_limit_reached(self):
        """Test a full day rejects even a small party"""
        settings = friday_only(max_reservations=2, max_guests_total=10)
        reservations = [existing(4), existing(4)]

        decision = check_day_admission(FRIDAY, 2, reservations, settings, now=NOW)

        assert not decision.allowed
        assert decision.reason == AdmissionRejectionReason.MAX_RESERVATIONS_REACHED
        assert decision.details == {
            "max_reservations": 2,
            "current_reservations": 2,
            "available_slots": 0,
        }

    def test_one_below_limit_is_allowed_at_limit_is_rejected(self):
        settings = friday_only(max_reservations=3, max_guests_total=100)

        below = check_day_admission(
            FRIDAY, 2, [existing(2), existing(2)], settings, now=NOW
        )
        at_limit = check_day_admission(
            FRIDAY, 2, [existing(2), existing(2), existing(2)], settings, now=NOW
        )

        assert below.allowed
        assert not at_limit.allowed
        assert at_limit.reason == AdmissionRejectionReason.MAX_RESERVATIONS_REACHED

    def test_guest_limit(self):
        settings = friday_only(max_reservations=10, max_guests_total=10)
        reservations = [existing(8)]

        exactly_full = check_day_admission(FRIDAY, 2, reservations, settings, now=NOW)
        over = check_day_admission(FRIDAY, 3, reservations, settings, now=NOW)

        assert exactly_full.allowed
        assert not over.allowed
        assert over.reason == AdmissionRejectionReason.MAX_GUESTS_REACHED
        assert over.details == {
            "max_guests_total": 10,
            "current_guests": 8,
            "requested_guests": 3,
            "available_guests": 2,
        }

    @pytest.mark.parametrize(
        "status",
        [ReservationStatus.SEATED, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW],
    )
    def test_only_pending_and_confirmed_count(self, status):
        settings = friday_only(max_reservations=1, max_guests_total=100)
        decision = check_day_admission(
            FRIDAY, 2, [existing(2, status=status)], settings, now=NOW
        )
        assert decision.allowed

    def test_other_days_do_not_count(self):
        settings = friday_only(max_reservations=1, max_guests_total=100)
        decision = check_day_admission(
            FRIDAY, 2, [existing(2, day=FRIDAY - timedelta(days=7))], settings, now=NOW
        )
        assert decision.allowed

    def test_past_date_rejected(self):
        settings = friday_only(max_reservations=10)
        decision = check_day_admission(
            FRIDAY, 2, [], settings, now=datetime(2030, 6, 15, 9, 0)
        )
        assert decision.reason == AdmissionRejectionReason.PAST_DATE

    def test_later_today_is_not_past(self):
        settings = friday_only(max_reservations=10)
        decision = check_day_admission(
            FRIDAY, 2, [], settings, now=datetime(2030, 6, 14, 22, 0)
        )
        assert decision.allowed

    def test_past_date_checked_before_rules(self):
        settings = AdmissionSettings(weekday_rules={})
        decision = check_day_admission(
            FRIDAY, 2, [], settings, now=datetime(2030, 6, 20, 9, 0)
        )
        assert decision.reason == AdmissionRejectionReason.PAST_DATE

    def test_no_rule_for_day(self):
        settings = friday_only(max_reservations=10)
        decision = check_day_admission(
            FRIDAY + timedelta(days=1), 2, [], settings, now=NOW
        )
        assert decision.reason == AdmissionRejectionReason.NO_RULE_DEFINED

    def test_closed_day(self):
        settings = friday_only(enabled=False, max_reservations=10)
        decision = check_day_admission(FRIDAY, 2, [], settings, now=NOW)
        assert decision.reason == AdmissionRejectionReason.DAY_CLOSED

    def test_advance_window(self):
        # Midnight on the 14th is three and a half days after NOW
        too_far = AdmissionSettings(
            max_advance_days=3, weekday_rules={Weekday.FRIDAY: WeekdayRule()}
        )
        just_inside = AdmissionSettings(
            max_advance_days=4, weekday_rules={Weekday.FRIDAY: WeekdayRule()}
        )

        rejected = check_day_admission(FRIDAY, 2, [], too_far, now=NOW)

        assert rejected.reason == AdmissionRejectionReason.ADVANCE_WINDOW_EXCEEDED
        assert rejected.details == {"max_advance_days": 3, "days_in_advance": 4}
        assert check_day_admission(FRIDAY, 2, [], just_inside, now=NOW).allowed

    def test_missing_limits_fall_back(self):
        settings = AdmissionSettings(weekday_rules={Weekday.FRIDAY: WeekdayRule()})

        far_friday = FRIDAY + timedelta(weeks=60)
        too_far = check_day_admission(far_friday, 2, [], settings, now=NOW)
        assert too_far.details["max_advance_days"] == 365

        full = check_day_admission(
            FRIDAY, 1, [existing(1) for _ in range(50)], settings, now=NOW
        )
        assert full.reason == AdmissionRejectionReason.MAX_RESERVATIONS_REACHED
        assert full.details["max_reservations"] == 50

        crowded = check_day_admission(FRIDAY, 1, [existing(100)], settings, now=NOW)
        assert crowded.reason == AdmissionRejectionReason.MAX_GUESTS_REACHED
        assert crowded.details["max_guests_total"] == 100

    def test_invalid_party_size(self):
        with pytest.raises(InvalidInputError):
            check_day_admission(FRIDAY, 0, [], default_admission_settings(), now=NOW)

    def test_default_settings_friday(self):
        decision = check_day_admission(
            FRIDAY, 4, [], default_admission_settings(), now=NOW
        )
        assert decision.allowed
        assert decision.details["max_reservations"] == 30
        assert decision.details["max_guests_total"] == 60


class TestDaysInAdvance:
    """Test the rounded-up day count"""

    def test_rounds_up(self):
        assert days_in_advance(FRIDAY, NOW) == 4
        assert days_in_advance(FRIDAY, datetime(2030, 6, 13, 0, 0)) == 1
        assert days_in_advance(FRIDAY, datetime(2030, 6, 13, 23, 59)) == 1

    def test_same_day_is_not_positive(self):
        assert days_in_advance(FRIDAY, datetime(2030, 6, 14, 9, 0)) <= 0


class TestResolveNow:
    """Test how "now" is expressed in restaurant local time"""

    def test_naive_value_is_kept(self):
        settings = AdmissionSettings(timezone="Europe/Madrid")
        assert resolve_now(settings, NOW) == NOW

    def test_aware_value_converted_to_restaurant_zone(self):
        settings = AdmissionSettings(timezone="Europe/Madrid")
        utc_now = datetime(2030, 6, 10, 10, 0, tzinfo=timezone.utc)
        assert resolve_now(settings, utc_now) == NOW

    def test_unknown_zone_falls_back_to_local_time(self):
        settings = AdmissionSettings(timezone="Nowhere/Special")
        assert resolve_now(settings).tzinfo is None


class TestAdmissionSettings:
    """Test parsing stored settings documents"""

    def test_camel_case_document(self):
        settings = AdmissionSettings.model_validate(
            {
                "reservations": {
                    "maxAdvanceDays": 10,
                    "defaultDuration": 90,
                    "autoConfirm": True,
                    "defaultPreferredLocation": "terrace",
                },
                "weekdayRules": {
                    "friday": {"enabled": False, "maxReservations": 5, "maxGuestsTotal": 12},
                },
            }
        )

        assert settings.max_advance_days == 10
        assert settings.default_duration_minutes == 90
        assert settings.auto_confirm is True
        assert settings.default_preferred_location == "terrace"
        rule = settings.rule_for(FRIDAY)
        assert rule.enabled is False
        assert rule.max_reservations == 5
        assert rule.max_guests_total == 12

    def test_missing_day_has_no_rule(self):
        settings = AdmissionSettings.model_validate({"weekdayRules": {}})
        assert settings.rule_for(FRIDAY) is None
        assert settings.max_advance_days is None

    def test_default_settings_cover_every_day(self):
        settings = default_admission_settings()
        assert set(settings.weekday_rules) == set(Weekday)
        assert settings.max_advance_days == 30
