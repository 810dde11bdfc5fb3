"""Trip and passenger models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar

from pydantic import field_validator

from pydrivesync._constants import PASSENGERS, TRIPS
from pydrivesync.models._base import DriveSyncEnum, DriveSyncModel, safe_float


class TripStatus(DriveSyncEnum):
    UNKNOWN = "unknown"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Trip(DriveSyncModel):
    """A scheduled or completed trip.

    ``driver_id``, ``vehicle_id`` and ``scheduler_id`` reference rows of
    ``drivers``, ``vehicles`` and ``users``; no referential checks are made
    client-side.
    """

    COLLECTION: ClassVar[str] = TRIPS

    id: str
    driver_id: str | None = None
    vehicle_id: str | None = None
    scheduler_id: str | None = None
    trip_date: date | None = None
    departure_time: datetime | None = None
    departure_mileage: float | None = None
    arrival_time: datetime | None = None
    arrival_mileage: float | None = None
    notes: str | None = None
    status: TripStatus = TripStatus.UNKNOWN
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def distance(self) -> float | None:
        """Kilometres driven, once both odometer readings are known."""
        if self.departure_mileage is None or self.arrival_mileage is None:
            return None
        return self.arrival_mileage - self.departure_mileage

    def is_on(self, day: date) -> bool:
        return self.trip_date == day and self.status is not TripStatus.CANCELLED

    @field_validator("departure_mileage", "arrival_mileage", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)


class Passenger(DriveSyncModel):
    """A passenger booked on a trip."""

    COLLECTION: ClassVar[str] = PASSENGERS

    id: str
    trip_id: str = ""
    name: str = ""
    document: str | None = None
    created_at: datetime | None = None
