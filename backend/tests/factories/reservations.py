# backend/tests/factories/reservations.py

import factory
from factory import Faker, LazyAttribute
from datetime import datetime, timedelta
from .base import BaseFactory
from modules.reservations.models.reservation_models import (
    Reservation, ReservationStatus, RestaurantSettings
)


class ReservationFactory(BaseFactory):
    """Factory for creating reservations.

    Pass ``start_time``; the day and a two hour end time follow from it.
    """

    class Meta:
        model = Reservation

    customer_id = Faker("random_int", min=1, max=10000)
    combined_table_ids = factory.LazyFunction(list)
    start_time = LazyAttribute(
        lambda obj: datetime.combine(datetime.now().date() + timedelta(days=1), datetime.min.time())
        + timedelta(hours=19)
    )
    end_time = LazyAttribute(lambda obj: obj.start_time + timedelta(hours=2))
    reservation_date = LazyAttribute(lambda obj: obj.start_time.date())
    party_size = 2
    status = ReservationStatus.CONFIRMED


class RestaurantSettingsFactory(BaseFactory):
    """Factory for stored restaurant settings documents."""

    class Meta:
        model = RestaurantSettings

    restaurant_id = 1
    data = factory.LazyFunction(
        lambda: {
            "reservations": {"maxAdvanceDays": 30, "autoConfirm": False},
            "weekdayRules": {
                day: {"enabled": True, "maxReservations": 20, "maxGuestsTotal": 40}
                for day in (
                    "monday", "tuesday", "wednesday", "thursday",
                    "friday", "saturday", "sunday",
                )
            },
        }
    )
