"""Dashboard figures computed from the fleet collections."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ConfigDict

from pydrivesync._constants import LICENSE_EXPIRY_WARNING_DAYS
from pydrivesync.models.driver import Driver
from pydrivesync.models.fuel import FuelRecord
from pydrivesync.models.maintenance import MaintenanceReminder
from pydrivesync.models.trip import Trip
from pydrivesync.models.vehicle import Vehicle
from pydrivesync.store import RemoteStore, parse_rows


class DashboardSummary(BaseModel):
    """Headline numbers shown on the dashboard."""

    model_config = ConfigDict(frozen=True)

    total_drivers: int = 0
    active_drivers: int = 0
    total_vehicles: int = 0
    available_vehicles: int = 0
    vehicles_in_maintenance: int = 0
    trips_today: int = 0
    fuel_spend_this_month: float = 0.0
    open_reminders: int = 0
    overdue_reminders: int = 0
    expiring_licenses: int = 0


def summarize(
    *,
    drivers: Iterable[Driver] = (),
    vehicles: Iterable[Vehicle] = (),
    trips: Iterable[Trip] = (),
    fuel_records: Iterable[FuelRecord] = (),
    reminders: Iterable[MaintenanceReminder] = (),
    today: date,
) -> DashboardSummary:
    """Compute the dashboard from typed rows as of *today*."""
    drivers = list(drivers)
    vehicles = list(vehicles)
    mileage_by_vehicle = {vehicle.id: vehicle.current_mileage for vehicle in vehicles}

    open_reminders = [reminder for reminder in reminders if reminder.is_open]
    fuel_spend = sum(
        record.total_amount or 0.0
        for record in fuel_records
        if record.fuel_date is not None
        and (record.fuel_date.year, record.fuel_date.month) == (today.year, today.month)
    )

    return DashboardSummary(
        total_drivers=len(drivers),
        active_drivers=sum(1 for driver in drivers if driver.is_available),
        total_vehicles=len(vehicles),
        available_vehicles=sum(1 for vehicle in vehicles if vehicle.is_available),
        vehicles_in_maintenance=sum(1 for vehicle in vehicles if vehicle.in_maintenance),
        trips_today=sum(1 for trip in trips if trip.is_on(today)),
        fuel_spend_this_month=round(fuel_spend, 2),
        open_reminders=len(open_reminders),
        overdue_reminders=sum(
            1
            for reminder in open_reminders
            if reminder.is_overdue(today, mileage_by_vehicle.get(reminder.vehicle_id))
        ),
        expiring_licenses=sum(
            1 for driver in drivers if driver.license_expires_soon(today, LICENSE_EXPIRY_WARNING_DAYS)
        ),
    )


async def load_dashboard_summary(store: RemoteStore, *, today: date | None = None) -> DashboardSummary:
    """Read the five fleet collections concurrently and summarize them.

    Raises :class:`pydrivesync.exceptions.StoreError` if any read fails.
    """
    driver_rows, vehicle_rows, trip_rows, fuel_rows, reminder_rows = await asyncio.gather(
        store.read(Driver.COLLECTION),
        store.read(Vehicle.COLLECTION),
        store.read(Trip.COLLECTION),
        store.read(FuelRecord.COLLECTION),
        store.read(MaintenanceReminder.COLLECTION),
    )
    return summarize(
        drivers=parse_rows(Driver, driver_rows),
        vehicles=parse_rows(Vehicle, vehicle_rows),
        trips=parse_rows(Trip, trip_rows),
        fuel_records=parse_rows(FuelRecord, fuel_rows),
        reminders=parse_rows(MaintenanceReminder, reminder_rows),
        today=today or date.today(),
    )
