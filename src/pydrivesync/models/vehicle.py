"""Vehicle model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import field_validator

from pydrivesync._constants import VEHICLES
from pydrivesync.models._base import DriveSyncEnum, DriveSyncModel, safe_float


class VehicleStatus(DriveSyncEnum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    MAINTENANCE = "maintenance"


class Vehicle(DriveSyncModel):
    """A vehicle of the municipal fleet.

    Fields are mapped from the ``vehicles`` collection.
    """

    COLLECTION: ClassVar[str] = VEHICLES

    id: str
    license_plate: str = ""
    """License plate."""
    model: str = ""
    """Model name (e.g. ``"Gol 1.0"``)."""
    type: str = ""
    """Vehicle category (car, van, bus, ...)."""
    current_mileage: float | None = None
    """Odometer reading in km."""
    internal_id: str | None = None
    """Internal fleet identifier painted on the vehicle."""
    status: VehicleStatus = VehicleStatus.UNKNOWN
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.status is VehicleStatus.AVAILABLE

    @property
    def in_maintenance(self) -> bool:
        return self.status is VehicleStatus.MAINTENANCE

    @property
    def display_name(self) -> str:
        """``"<plate> - <model>"``, with the internal id when present."""
        label = f"{self.license_plate} - {self.model}".strip(" -")
        if self.internal_id:
            return f"{label} ({self.internal_id})"
        return label

    @field_validator("current_mileage", mode="before")
    @classmethod
    def _coerce_float(cls, value: Any) -> float | None:
        return safe_float(value)
