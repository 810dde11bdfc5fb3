from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import AuthenticationError, DriveSyncTransportError
from pydrivesync.gate import Screen, SessionGate, select_screen
from pydrivesync.identity import AuthEvent, RemoteIdentityProvider, SessionListener
from pydrivesync.models.token import AuthUser
from pydrivesync.session import Session, SessionSnapshot, SessionState


def _make_session(email: str = "admin@example.gov") -> Session:
    return Session(
        user=AuthUser(id="user-1", email=email, role="admin"),
        access_token="access-1",
        refresh_token="refresh-1",
    )


class FakeIdentity:
    """Identity provider double with scripted outcomes."""

    def __init__(self, *, session: Session | None = None) -> None:
        self.session = session
        self.accounts: dict[str, str] = {"admin@example.gov": "demo123"}
        self.resolve_error: Exception | None = None
        self.sign_out_error: Exception | None = None
        self.calls: dict[str, int] = {}
        self._listeners: list[SessionListener] = []

    def _record(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def emit(self, event: AuthEvent, session: Session | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    async def get_current_session(self) -> Session | None:
        self._record("get_current_session")
        if self.resolve_error is not None:
            raise self.resolve_error
        return self.session

    async def sign_in(self, identifier: str, secret: str) -> Session:
        self._record("sign_in")
        if self.accounts.get(identifier) != secret:
            raise AuthenticationError("Invalid login credentials", code="400")
        self.session = _make_session(identifier)
        return self.session

    async def sign_out(self) -> None:
        self._record("sign_out")
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.session = None


class _TokenEndpoint:
    """Transport double answering every token request with the same body."""

    def __init__(self, body: Any) -> None:
        self.body = body
        self.requests: list[str] = []

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        bearer: str | None = None,
    ) -> Any:
        self.requests.append(url)
        return self.body


MALFORMED_TOKEN = {"access_token": "a", "expires_in": "soon", "user": {"id": "user-1"}}


# ------------------------------------------------------------------
# Screen selection
# ------------------------------------------------------------------


def test_select_screen_covers_every_state() -> None:
    assert select_screen(SessionState.RESOLVING, False) is Screen.LOADING
    assert select_screen(SessionState.RESOLVING, True) is Screen.LOADING
    assert select_screen(SessionState.UNAUTHENTICATED, False) is Screen.LANDING
    assert select_screen(SessionState.UNAUTHENTICATED, True) is Screen.LOGIN
    assert select_screen(SessionState.AUTHENTICATED, False) is Screen.SHELL
    assert select_screen(SessionState.AUTHENTICATED, True) is Screen.SHELL


def test_select_screen_is_deterministic() -> None:
    for state in SessionState:
        for wants_login in (False, True):
            assert select_screen(state, wants_login) is select_screen(state, wants_login)


# ------------------------------------------------------------------
# Resolution
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_gate_starts_resolving() -> None:
    gate = SessionGate(FakeIdentity())
    assert gate.state is SessionState.RESOLVING
    assert gate.current_session() == SessionSnapshot(state=SessionState.RESOLVING)


@pytest.mark.asyncio
async def test_resolve_without_session_is_unauthenticated() -> None:
    gate = SessionGate(FakeIdentity())
    snapshot = await gate.resolve()
    assert snapshot.state is SessionState.UNAUTHENTICATED
    assert snapshot.session is None


@pytest.mark.asyncio
async def test_resolve_with_existing_session_is_authenticated() -> None:
    identity = FakeIdentity(session=_make_session())
    gate = SessionGate(identity)

    snapshot = await gate.resolve()
    assert snapshot.is_authenticated is True
    assert snapshot.user_id == "user-1"
    assert snapshot.email == "admin@example.gov"


@pytest.mark.asyncio
async def test_resolution_error_settles_unauthenticated() -> None:
    identity = FakeIdentity()
    identity.resolve_error = DriveSyncTransportError("connection refused")
    gate = SessionGate(identity)

    snapshot = await gate.resolve()
    assert snapshot.state is SessionState.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_resolve_happens_once() -> None:
    identity = FakeIdentity()
    gate = SessionGate(identity)

    await gate.resolve()
    identity.session = _make_session()
    snapshot = await gate.resolve()

    assert snapshot.state is SessionState.UNAUTHENTICATED
    assert identity.calls["get_current_session"] == 1


# ------------------------------------------------------------------
# Sign-in / sign-out
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_sign_in_with_valid_credentials_authenticates() -> None:
    gate = SessionGate(FakeIdentity())
    await gate.resolve()

    snapshot = await gate.sign_in("admin@example.gov", "demo123")
    assert snapshot.state is SessionState.AUTHENTICATED
    assert snapshot.email == "admin@example.gov"
    assert gate.current_session() == snapshot


@pytest.mark.asyncio
async def test_sign_in_with_wrong_password_raises_and_stays_unauthenticated() -> None:
    identity = FakeIdentity()
    gate = SessionGate(identity)
    await gate.resolve()

    with pytest.raises(AuthenticationError):
        await gate.sign_in("admin@example.gov", "wrong")

    assert gate.state is SessionState.UNAUTHENTICATED
    assert identity.calls["sign_in"] == 1


@pytest.mark.asyncio
async def test_failed_sign_in_while_resolving_settles_unauthenticated() -> None:
    gate = SessionGate(FakeIdentity())

    with pytest.raises(AuthenticationError):
        await gate.sign_in("admin@example.gov", "wrong")

    assert gate.state is SessionState.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_malformed_token_body_fails_sign_in_with_authentication_error() -> None:
    config = DriveSyncConfig(base_url="https://fleet.example.gov", api_key="anon-key")
    identity = RemoteIdentityProvider(config, _TokenEndpoint(MALFORMED_TOKEN))
    gate = SessionGate(identity)
    await gate.resolve()

    with pytest.raises(AuthenticationError, match="Malformed token response"):
        await gate.sign_in("admin@example.gov", "demo123")

    assert gate.state is SessionState.UNAUTHENTICATED
    assert identity.session is None


@pytest.mark.asyncio
async def test_malformed_refresh_body_settles_unauthenticated() -> None:
    config = DriveSyncConfig(base_url="https://fleet.example.gov", api_key="anon-key")
    expired = Session(
        user=AuthUser(id="user-1", email="admin@example.gov"),
        access_token="access-old",
        refresh_token="refresh-old",
        expires_at=time.time() - 10,
    )
    transport = _TokenEndpoint(MALFORMED_TOKEN)
    gate = SessionGate(RemoteIdentityProvider(config, transport, session=expired))

    snapshot = await gate.resolve()

    assert snapshot.state is SessionState.UNAUTHENTICATED
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_sign_out_clears_session_and_is_idempotent() -> None:
    identity = FakeIdentity(session=_make_session())
    gate = SessionGate(identity)
    await gate.resolve()

    snapshot = await gate.sign_out()
    assert snapshot.state is SessionState.UNAUTHENTICATED
    assert snapshot.session is None

    snapshot = await gate.sign_out()
    assert snapshot.state is SessionState.UNAUTHENTICATED
    assert identity.calls["sign_out"] == 1


@pytest.mark.asyncio
async def test_failed_sign_out_keeps_session() -> None:
    identity = FakeIdentity(session=_make_session())
    identity.sign_out_error = AuthenticationError("Sign-out failed: HTTP 500")
    gate = SessionGate(identity)
    await gate.resolve()

    with pytest.raises(AuthenticationError):
        await gate.sign_out()

    assert gate.state is SessionState.AUTHENTICATED
    assert gate.current_session().user_id == "user-1"


# ------------------------------------------------------------------
# Identity notifications
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_session_loss_notification_moves_to_unauthenticated() -> None:
    identity = FakeIdentity(session=_make_session())
    gate = SessionGate(identity)
    seen: list[SessionSnapshot] = []
    gate.subscribe(seen.append)
    await gate.resolve()

    identity.emit(AuthEvent.SIGNED_OUT, None)

    assert gate.state is SessionState.UNAUTHENTICATED
    assert [snapshot.state for snapshot in seen] == [
        SessionState.AUTHENTICATED,
        SessionState.UNAUTHENTICATED,
    ]


@pytest.mark.asyncio
async def test_token_refresh_notification_updates_session() -> None:
    identity = FakeIdentity(session=_make_session())
    gate = SessionGate(identity)
    await gate.resolve()

    refreshed = Session(
        user=AuthUser(id="user-1", email="admin@example.gov"),
        access_token="access-2",
        refresh_token="refresh-2",
    )
    identity.emit(AuthEvent.TOKEN_REFRESHED, refreshed)

    assert gate.state is SessionState.AUTHENTICATED
    assert gate.current_session().session == refreshed


@pytest.mark.asyncio
async def test_notifications_before_resolution_are_ignored() -> None:
    identity = FakeIdentity()
    gate = SessionGate(identity)

    identity.emit(AuthEvent.SIGNED_IN, _make_session())
    assert gate.state is SessionState.RESOLVING


@pytest.mark.asyncio
async def test_listener_errors_do_not_break_transitions() -> None:
    gate = SessionGate(FakeIdentity())

    def _boom(_snapshot: SessionSnapshot) -> None:
        raise RuntimeError("listener failure")

    gate.subscribe(_boom)
    snapshot = await gate.resolve()
    assert snapshot.state is SessionState.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_sign_in_during_resolution_wins() -> None:
    identity = FakeIdentity()
    release = asyncio.Event()

    async def slow_session() -> Any:
        await release.wait()
        return None

    identity.get_current_session = slow_session  # type: ignore[method-assign]
    gate = SessionGate(identity)

    resolving = asyncio.create_task(gate.resolve())
    await asyncio.sleep(0)
    await gate.sign_in("admin@example.gov", "demo123")
    release.set()
    snapshot = await resolving

    assert snapshot.state is SessionState.AUTHENTICATED
