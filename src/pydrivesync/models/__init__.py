"""Data models for DriveSync collections and auth responses."""

from pydrivesync.models._base import DriveSyncEnum, DriveSyncModel, safe_float
from pydrivesync.models.driver import Driver, DriverStatus, filter_drivers
from pydrivesync.models.fuel import FuelRecord
from pydrivesync.models.maintenance import MaintenanceReminder, ReminderStatus
from pydrivesync.models.requests import CollectionReadRequest, SignInRequest, normalize_selection
from pydrivesync.models.tenant import SystemConfig, UserProfile, UserRole
from pydrivesync.models.token import AuthToken, AuthUser
from pydrivesync.models.trip import Passenger, Trip, TripStatus
from pydrivesync.models.vehicle import Vehicle, VehicleStatus

#: Typed row model per collection name.
COLLECTION_MODELS: dict[str, type[DriveSyncModel]] = {
    model.COLLECTION: model
    for model in (
        SystemConfig,
        UserProfile,
        Driver,
        Vehicle,
        Trip,
        Passenger,
        FuelRecord,
        MaintenanceReminder,
    )
}

__all__ = [
    "COLLECTION_MODELS",
    "AuthToken",
    "AuthUser",
    "CollectionReadRequest",
    "Driver",
    "DriverStatus",
    "DriveSyncEnum",
    "DriveSyncModel",
    "FuelRecord",
    "MaintenanceReminder",
    "Passenger",
    "ReminderStatus",
    "SignInRequest",
    "SystemConfig",
    "Trip",
    "TripStatus",
    "UserProfile",
    "UserRole",
    "Vehicle",
    "VehicleStatus",
    "filter_drivers",
    "normalize_selection",
    "safe_float",
]
