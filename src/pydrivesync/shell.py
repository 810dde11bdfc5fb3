"""Application shell: composes the session gate, screens and list views."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError

from pydrivesync._constants import SYSTEM_CONFIG
from pydrivesync.dashboard import DashboardSummary, load_dashboard_summary
from pydrivesync.exceptions import AuthenticationError, StoreError
from pydrivesync.fetcher import CollectionFetcher
from pydrivesync.gate import Screen, SessionGate, select_screen
from pydrivesync.models.tenant import SystemConfig
from pydrivesync.navigation import View, nav_item, view_from_hash
from pydrivesync.session import SessionSnapshot, SessionState
from pydrivesync.store import RemoteStore

_logger = logging.getLogger(__name__)

LOGIN_ERROR_MESSAGE = "Invalid credentials. Check your email and password."
LOGOUT_ERROR_MESSAGE = "Could not sign out. Try again."


class AppShell:
    """Top-level application state.

    The shell owns everything the gate does not: whether the visitor asked
    for the login screen, the current view and its fetcher, the tenant row
    and the user-facing error messages. Errors from the gate and the store
    stop here and become messages.
    """

    def __init__(self, gate: SessionGate, store: RemoteStore, *, view: View = View.DASHBOARD) -> None:
        self._gate = gate
        self._store = store
        self._view = view
        self.wants_login_screen = False
        self.signing_in = False
        self.login_error: str | None = None
        self.logout_error: str | None = None
        self.tenant: SystemConfig | None = None
        self.dashboard: DashboardSummary | None = None
        self.dashboard_error: str | None = None
        self._fetcher: CollectionFetcher[Any] | None = None
        self._unsubscribe = gate.subscribe(self._on_session_change)

    @property
    def screen(self) -> Screen:
        return select_screen(self._gate.state, self.wants_login_screen)

    @property
    def view(self) -> View:
        return self._view

    @property
    def fetcher(self) -> CollectionFetcher[Any] | None:
        """Fetcher of the mounted list view, if any."""
        return self._fetcher

    async def start(self) -> Screen:
        """Resolve the session and, when signed in, mount the current view."""
        snapshot = await self._gate.resolve()
        if snapshot.is_authenticated:
            await self.load_tenant()
            self._mount(self._view)
        return self.screen

    def close(self) -> None:
        self._unmount()
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Landing / login
    # ------------------------------------------------------------------

    def show_login(self) -> None:
        self.wants_login_screen = True

    def show_landing(self) -> None:
        self.wants_login_screen = False
        self.login_error = None

    async def submit_login(self, email: str, password: str) -> bool:
        """Sign in from the login form; returns whether it succeeded."""
        self.signing_in = True
        self.login_error = None
        try:
            await self._gate.sign_in(email, password)
        except AuthenticationError as exc:
            _logger.info("Sign-in rejected for %s: %s", email, exc)
            self.login_error = LOGIN_ERROR_MESSAGE
            return False
        finally:
            self.signing_in = False
        await self.load_tenant()
        self._mount(self._view)
        return True

    async def logout(self) -> bool:
        """Sign out from the shell header; returns whether it succeeded."""
        self.logout_error = None
        try:
            await self._gate.sign_out()
        except AuthenticationError as exc:
            _logger.warning("Sign-out failed: %s", exc)
            self.logout_error = LOGOUT_ERROR_MESSAGE
            return False
        return True

    # ------------------------------------------------------------------
    # Tenant / dashboard
    # ------------------------------------------------------------------

    async def load_tenant(self) -> SystemConfig | None:
        """Read the organisation row (the first ``system_config`` row)."""
        try:
            row = await self._store.read_first(SYSTEM_CONFIG)
        except StoreError as exc:
            _logger.warning("Could not load tenant: %s", exc)
            return self.tenant
        if row is None:
            _logger.warning("No %s row found", SYSTEM_CONFIG)
            return self.tenant
        try:
            self.tenant = SystemConfig.model_validate(row)
        except ValidationError:
            _logger.warning("Invalid %s row", SYSTEM_CONFIG, exc_info=True)
        return self.tenant

    async def load_dashboard(self, today: date | None = None) -> DashboardSummary | None:
        self.dashboard_error = None
        try:
            self.dashboard = await load_dashboard_summary(self._store, today=today)
        except StoreError as exc:
            _logger.warning("Could not load dashboard: %s", exc)
            self.dashboard_error = str(exc)
        return self.dashboard

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, target: View | str) -> View:
        """Switch views: unmount the old list view, mount the new one.

        Strings are resolved as hash routes; an empty route keeps the
        current view.
        """
        view = target if isinstance(target, View) else view_from_hash(target, default=self._view)
        if view is self._view and (self._fetcher is not None or nav_item(view).row_model is None):
            return view
        self._unmount()
        self._view = view
        if self._gate.state is SessionState.AUTHENTICATED:
            self._mount(view)
        return view

    def _mount(self, view: View) -> None:
        item = nav_item(view)
        if item.row_model is None or self._fetcher is not None:
            return
        fetcher: CollectionFetcher[Any] = CollectionFetcher(
            self._store,
            item.row_model.COLLECTION,
            row_model=item.row_model,
        )
        self._fetcher = fetcher
        fetcher.activate()

    def _unmount(self) -> None:
        if self._fetcher is not None:
            self._fetcher.close()
            self._fetcher = None

    def _on_session_change(self, snapshot: SessionSnapshot) -> None:
        if snapshot.is_authenticated:
            return
        self._unmount()
        self.tenant = None
        self.dashboard = None
