"""High-level async client for the DriveSync fleet backend."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any, TypeVar

import aiohttp
from pydantic import ValidationError

from pydrivesync._constants import ALL_FIELDS, SYSTEM_CONFIG
from pydrivesync._transport import HttpTransport
from pydrivesync.config import DriveSyncConfig
from pydrivesync.dashboard import DashboardSummary, load_dashboard_summary
from pydrivesync.exceptions import DriveSyncError, StoreError
from pydrivesync.fetcher import CollectionFetcher
from pydrivesync.gate import SessionGate
from pydrivesync.identity import RemoteIdentityProvider
from pydrivesync.models._base import DriveSyncModel
from pydrivesync.models.driver import Driver
from pydrivesync.models.fuel import FuelRecord
from pydrivesync.models.maintenance import MaintenanceReminder
from pydrivesync.models.tenant import SystemConfig
from pydrivesync.models.trip import Trip
from pydrivesync.models.vehicle import Vehicle
from pydrivesync.session import Session, SessionSnapshot
from pydrivesync.shell import AppShell
from pydrivesync.store import RestStore, Selection

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=DriveSyncModel)


class DriveSyncClient:
    """Async client for the DriveSync backend.

    Usage::

        async with DriveSyncClient(DriveSyncConfig.from_env()) as client:
            await client.sign_in("admin@example.gov", "demo123")
            drivers = await client.get_drivers()

    Parameters
    ----------
    config : DriveSyncConfig
        Backend location and API key.
    session : aiohttp.ClientSession, optional
        Shared HTTP session. When omitted the client creates one and
        closes it on exit.
    auth_session : Session, optional
        A previously persisted session to resume instead of signing in.
    """

    def __init__(
        self,
        config: DriveSyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        auth_session: Session | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._auth_session = auth_session
        self._transport: HttpTransport | None = None
        self._identity: RemoteIdentityProvider | None = None
        self._store: RestStore | None = None
        self._gate: SessionGate | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DriveSyncClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        self._identity = RemoteIdentityProvider(self._config, self._transport, session=self._auth_session)
        self._store = RestStore(self._config, self._transport, token_provider=self._identity.get_access_token)
        self._gate = SessionGate(self._identity)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._gate is not None:
            self._gate.close()
        if self._identity is not None:
            # Keep the session so a re-entered client resumes it.
            self._auth_session = self._identity.session
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._identity = None
        self._store = None
        self._gate = None

    def _require_gate(self) -> SessionGate:
        if self._gate is None:
            raise DriveSyncError("Client not initialized. Use 'async with DriveSyncClient(...) as client:'")
        return self._gate

    def _require_identity(self) -> RemoteIdentityProvider:
        if self._identity is None:
            raise DriveSyncError("Client not initialized. Use 'async with DriveSyncClient(...) as client:'")
        return self._identity

    def _require_store(self) -> RestStore:
        if self._store is None:
            raise DriveSyncError("Client not initialized. Use 'async with DriveSyncClient(...) as client:'")
        return self._store

    @property
    def config(self) -> DriveSyncConfig:
        return self._config

    @property
    def gate(self) -> SessionGate:
        return self._require_gate()

    @property
    def identity(self) -> RemoteIdentityProvider:
        return self._require_identity()

    @property
    def store(self) -> RestStore:
        return self._require_store()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def resolve_session(self) -> SessionSnapshot:
        """Settle the initial session state (signed in or not)."""
        return await self._require_gate().resolve()

    async def sign_in(self, email: str, password: str) -> SessionSnapshot:
        """Sign in with email and password.

        Raises :class:`pydrivesync.exceptions.AuthenticationError` when the
        credentials are rejected or the auth service is unreachable.
        """
        return await self._require_gate().sign_in(email, password)

    async def sign_out(self) -> SessionSnapshot:
        return await self._require_gate().sign_out()

    def current_session(self) -> SessionSnapshot:
        return self._require_gate().current_session()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetcher(
        self,
        collection: str,
        selection: Selection = ALL_FIELDS,
        *,
        refresh_keys: Sequence[Any] = (),
        row_model: type[DriveSyncModel] | None = None,
    ) -> CollectionFetcher[Any]:
        """Create an (inactive) fetcher bound to this client's store."""
        return CollectionFetcher(
            self._require_store(),
            collection,
            selection,
            refresh_keys=refresh_keys,
            row_model=row_model,
        )

    async def read(self, collection: str, selection: Selection = ALL_FIELDS) -> list[dict[str, Any]]:
        """Read raw rows of any collection."""
        return await self._require_store().read(collection, selection)

    async def list_rows(self, model: type[ModelT]) -> list[ModelT]:
        """Read every row of ``model.COLLECTION`` as typed models."""
        return await self._require_store().read_models(model)

    async def get_tenant(self) -> SystemConfig | None:
        """Fetch the organisation branding row, ``None`` if there is none."""
        row = await self._require_store().read_first(SYSTEM_CONFIG)
        if row is None:
            _logger.debug("No %s row found", SYSTEM_CONFIG)
            return None
        try:
            return SystemConfig.model_validate(row)
        except ValidationError as exc:
            raise StoreError(f"Invalid {SYSTEM_CONFIG} row", code="invalid_row", endpoint=f"/{SYSTEM_CONFIG}") from exc

    async def get_drivers(self) -> list[Driver]:
        return await self.list_rows(Driver)

    async def get_vehicles(self) -> list[Vehicle]:
        return await self.list_rows(Vehicle)

    async def get_trips(self) -> list[Trip]:
        return await self.list_rows(Trip)

    async def get_fuel_records(self) -> list[FuelRecord]:
        return await self.list_rows(FuelRecord)

    async def get_maintenance_reminders(self) -> list[MaintenanceReminder]:
        return await self.list_rows(MaintenanceReminder)

    async def get_dashboard_summary(self, today: date | None = None) -> DashboardSummary:
        """Compute the dashboard figures from the fleet collections."""
        return await load_dashboard_summary(self._require_store(), today=today)

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def create_shell(self) -> AppShell:
        """Build an application shell wired to this client's gate and store."""
        return AppShell(self._require_gate(), self._require_store())
