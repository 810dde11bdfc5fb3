"""pydrivesync - Async Python client for the DriveSync fleet management backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pydrivesync")
except PackageNotFoundError:
    __version__ = "0+local"
from pydrivesync.client import DriveSyncClient
from pydrivesync.config import DriveSyncConfig
from pydrivesync.dashboard import DashboardSummary
from pydrivesync.exceptions import (
    AuthenticationError,
    DriveSyncApiError,
    DriveSyncConfigError,
    DriveSyncError,
    DriveSyncTransportError,
    StoreError,
)
from pydrivesync.fetcher import CollectionFetcher, FetchResult
from pydrivesync.gate import Screen, SessionGate, select_screen
from pydrivesync.identity import AuthEvent, IdentityProvider, RemoteIdentityProvider
from pydrivesync.models import (
    COLLECTION_MODELS,
    AuthToken,
    AuthUser,
    Driver,
    DriverStatus,
    FuelRecord,
    MaintenanceReminder,
    Passenger,
    SystemConfig,
    Trip,
    TripStatus,
    UserProfile,
    Vehicle,
    VehicleStatus,
)
from pydrivesync.navigation import NAVIGATION, View
from pydrivesync.session import Session, SessionSnapshot, SessionState
from pydrivesync.shell import AppShell
from pydrivesync.store import RemoteStore, RestStore

__all__ = [
    "__version__",
    "COLLECTION_MODELS",
    "NAVIGATION",
    "AppShell",
    "AuthEvent",
    "AuthToken",
    "AuthUser",
    "AuthenticationError",
    "CollectionFetcher",
    "DashboardSummary",
    "Driver",
    "DriverStatus",
    "DriveSyncApiError",
    "DriveSyncClient",
    "DriveSyncConfig",
    "DriveSyncConfigError",
    "DriveSyncError",
    "DriveSyncTransportError",
    "FetchResult",
    "FuelRecord",
    "IdentityProvider",
    "MaintenanceReminder",
    "Passenger",
    "RemoteIdentityProvider",
    "RemoteStore",
    "RestStore",
    "Screen",
    "Session",
    "SessionGate",
    "SessionSnapshot",
    "SessionState",
    "StoreError",
    "SystemConfig",
    "Trip",
    "TripStatus",
    "UserProfile",
    "Vehicle",
    "VehicleStatus",
    "View",
    "select_screen",
]
