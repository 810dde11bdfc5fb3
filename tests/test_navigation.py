from __future__ import annotations

from pydrivesync.models.driver import Driver
from pydrivesync.navigation import NAVIGATION, View, nav_item, view_from_hash


def test_every_view_has_a_navigation_entry() -> None:
    assert [item.view for item in NAVIGATION] == list(View)
    assert nav_item(View.DRIVERS).row_model is Driver
    assert nav_item(View.DASHBOARD).row_model is None
    assert nav_item(View.FUEL).href == "#fuel"


def test_view_from_hash_accepts_route_forms() -> None:
    assert view_from_hash("#drivers") is View.DRIVERS
    assert view_from_hash("/vehicles/") is View.VEHICLES
    assert view_from_hash("TRIPS") is View.TRIPS


def test_view_from_hash_maps_legacy_routes() -> None:
    assert view_from_hash("#motoristas") is View.DRIVERS
    assert view_from_hash("#abastecimentos") is View.FUEL
    assert view_from_hash("#configuracoes") is View.SETTINGS


def test_view_from_hash_falls_back_to_default() -> None:
    assert view_from_hash(None) is View.DASHBOARD
    assert view_from_hash("#") is View.DASHBOARD
    assert view_from_hash("#reports", default=View.TRIPS) is View.TRIPS
