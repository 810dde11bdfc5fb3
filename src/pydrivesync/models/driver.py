"""Driver model."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import ClassVar

from pydrivesync._constants import DRIVERS, LICENSE_EXPIRY_WARNING_DAYS
from pydrivesync.models._base import DriveSyncEnum, DriveSyncModel


class DriverStatus(DriveSyncEnum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class Driver(DriveSyncModel):
    """A driver registered in the fleet.

    Fields are mapped from the ``drivers`` collection.
    """

    COLLECTION: ClassVar[str] = DRIVERS

    id: str
    name: str = ""
    phone: str | None = None
    license_number: str | None = None
    """Driver's licence (CNH) number."""
    license_expiry: date | None = None
    status: DriverStatus = DriverStatus.UNKNOWN
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.status is DriverStatus.AVAILABLE

    def days_until_license_expiry(self, today: date) -> int | None:
        """Days left on the licence, negative once expired."""
        if self.license_expiry is None:
            return None
        return (self.license_expiry - today).days

    def license_expires_soon(self, today: date, within_days: int = LICENSE_EXPIRY_WARNING_DAYS) -> bool:
        """Whether the licence expires within *within_days* (or already has)."""
        remaining = self.days_until_license_expiry(today)
        return remaining is not None and remaining <= within_days


def filter_drivers(drivers: Iterable[Driver], term: str) -> list[Driver]:
    """Case-insensitive name match or phone substring match.

    The term is stripped before both matches, so a pasted phone number
    with surrounding spaces still matches. An empty *term* returns every
    driver.
    """
    needle = term.strip()
    if not needle:
        return list(drivers)
    lowered = needle.lower()
    return [
        driver
        for driver in drivers
        if lowered in driver.name.lower() or (driver.phone is not None and needle in driver.phone)
    ]
