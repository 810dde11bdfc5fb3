"""Fuel record model."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar

from pydantic import field_validator

from pydrivesync._constants import FUEL_RECORDS
from pydrivesync.models._base import DriveSyncModel, safe_float


class FuelRecord(DriveSyncModel):
    """A refuelling, optionally linked to a trip, driver and vehicle.

    Parameters
    ----------
    fuel_date : date or None
        Day of the refuelling.
    location : str
        Fuel station.
    fuel_type : str
        Free-text fuel type (``"gasoline"``, ``"diesel"``...).
    liters : float or None
        Volume in litres.
    total_amount : float or None
        Amount paid, in the organisation's currency.
    mileage : float or None
        Odometer reading at the pump.
    receipt_url : str or None
        Link to the uploaded receipt.
    """

    COLLECTION: ClassVar[str] = FUEL_RECORDS

    id: str
    trip_id: str | None = None
    driver_id: str | None = None
    vehicle_id: str | None = None
    fuel_date: date | None = None
    location: str = ""
    fuel_type: str = ""
    liters: float | None = None
    total_amount: float | None = None
    mileage: float | None = None
    receipt_url: str | None = None
    created_at: datetime | None = None

    @property
    def price_per_liter(self) -> float | None:
        if not self.liters or self.total_amount is None:
            return None
        return self.total_amount / self.liters

    @field_validator("liters", "total_amount", "mileage", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)
