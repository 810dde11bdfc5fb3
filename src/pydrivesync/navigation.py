"""Authenticated-shell navigation: views, labels and hash routes."""

from __future__ import annotations

import dataclasses
import enum

from pydrivesync.models._base import DriveSyncModel
from pydrivesync.models.driver import Driver
from pydrivesync.models.fuel import FuelRecord
from pydrivesync.models.maintenance import MaintenanceReminder
from pydrivesync.models.trip import Trip
from pydrivesync.models.vehicle import Vehicle


class View(enum.StrEnum):
    DASHBOARD = "dashboard"
    DRIVERS = "drivers"
    VEHICLES = "vehicles"
    TRIPS = "trips"
    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    SETTINGS = "settings"


@dataclasses.dataclass(frozen=True)
class NavItem:
    """One sidebar entry; list views carry the row model they display."""

    view: View
    label: str
    row_model: type[DriveSyncModel] | None = None

    @property
    def href(self) -> str:
        return f"#{self.view.value}"


NAVIGATION: tuple[NavItem, ...] = (
    NavItem(View.DASHBOARD, "Dashboard"),
    NavItem(View.DRIVERS, "Drivers", Driver),
    NavItem(View.VEHICLES, "Vehicles", Vehicle),
    NavItem(View.TRIPS, "Trips", Trip),
    NavItem(View.FUEL, "Fuel", FuelRecord),
    NavItem(View.MAINTENANCE, "Maintenance", MaintenanceReminder),
    NavItem(View.SETTINGS, "Settings"),
)

_BY_VIEW: dict[View, NavItem] = {item.view: item for item in NAVIGATION}

# Routes of the first (Portuguese) release, still found in bookmarks.
_LEGACY_ROUTES: dict[str, View] = {
    "motoristas": View.DRIVERS,
    "veiculos": View.VEHICLES,
    "viagens": View.TRIPS,
    "abastecimentos": View.FUEL,
    "manutencao": View.MAINTENANCE,
    "configuracoes": View.SETTINGS,
}


def nav_item(view: View) -> NavItem:
    return _BY_VIEW[view]


def view_from_hash(fragment: str | None, default: View = View.DASHBOARD) -> View:
    """Resolve ``"#drivers"``, ``"/drivers"`` or ``"drivers"`` to a view.

    Empty or unknown routes resolve to *default*.
    """
    if not fragment:
        return default
    route = fragment.strip().lstrip("#").strip("/").lower()
    if not route:
        return default
    if route in _LEGACY_ROUTES:
        return _LEGACY_ROUTES[route]
    try:
        return View(route)
    except ValueError:
        return default
