"""Identity provider: credential verification and session issuance."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from typing import Protocol

from pydantic import ValidationError

from pydrivesync._api import auth as _auth_api
from pydrivesync._transport import Transport
from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import AuthenticationError
from pydrivesync.models.requests import SignInRequest
from pydrivesync.session import Session

_logger = logging.getLogger(__name__)


class AuthEvent(enum.StrEnum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    TOKEN_REFRESHED = "token_refreshed"


SessionListener = Callable[[AuthEvent, Session | None], None]


class IdentityProvider(Protocol):
    """Structural interface consumed by :class:`pydrivesync.gate.SessionGate`."""

    async def get_current_session(self) -> Session | None:
        ...

    async def sign_in(self, identifier: str, secret: str) -> Session:
        ...

    async def sign_out(self) -> None:
        ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        ...


class RemoteIdentityProvider:
    """Identity provider backed by the hosted auth service.

    Holds at most one session in memory. An expired session is refreshed
    on the next :meth:`get_current_session` call when a refresh token is
    available; a failed refresh drops the session and notifies listeners
    with :attr:`AuthEvent.SIGNED_OUT`.
    """

    def __init__(
        self,
        config: DriveSyncConfig,
        transport: Transport,
        *,
        session: Session | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._session = session
        self._listeners: list[SessionListener] = []
        self._refresh_lock = asyncio.Lock()

    @property
    def session(self) -> Session | None:
        return self._session

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a session-change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: AuthEvent, session: Session | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                _logger.debug("Session listener failed for %s", event, exc_info=True)

    def _drop_session(self) -> None:
        if self._session is None:
            return
        self._session = None
        self._notify(AuthEvent.SIGNED_OUT, None)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def get_current_session(self) -> Session | None:
        """Return the held session, refreshing it first if it expired."""
        session = self._session
        if session is None or not session.is_expired(self._config.refresh_margin):
            return session

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited.
            if self._session is not session:
                return self._session
            if not self._config.auto_refresh_token or not session.refresh_token:
                _logger.debug("Session for user=%s expired without refresh", session.user_id)
                self._drop_session()
                return None
            try:
                token = await _auth_api.refresh_token(self._config, self._transport, session.refresh_token)
            except AuthenticationError:
                _logger.warning("Session refresh failed for user=%s", session.user_id, exc_info=True)
                self._drop_session()
                return None
            self._session = Session.from_token(token)
            _logger.debug("Session refreshed for user=%s", token.user.id)
            self._notify(AuthEvent.TOKEN_REFRESHED, self._session)
            return self._session

    async def get_access_token(self) -> str | None:
        """Bearer token for store reads, ``None`` when signed out."""
        session = await self.get_current_session()
        return session.access_token if session is not None else None

    async def sign_in(self, identifier: str, secret: str) -> Session:
        """Sign in with email and password."""
        try:
            request = SignInRequest(identifier=identifier, secret=secret)
        except ValidationError as exc:
            raise AuthenticationError(f"Invalid credentials: {exc.errors()[0]['msg']}") from exc

        token = await _auth_api.sign_in_with_password(self._config, self._transport, request)
        self._session = Session.from_token(token)
        _logger.debug("Signed in user=%s role=%s", token.user.id, token.user.role)
        self._notify(AuthEvent.SIGNED_IN, self._session)
        return self._session

    async def sign_out(self) -> None:
        """Revoke the held session; a no-op when signed out."""
        session = self._session
        if session is None:
            return
        await _auth_api.sign_out(self._config, self._transport, session.access_token)
        _logger.debug("Signed out user=%s", session.user_id)
        self._drop_session()
