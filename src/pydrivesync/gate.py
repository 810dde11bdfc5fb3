"""Session gate: authentication state and top-level screen selection.

The gate is the only owner of the current :class:`SessionState`. Other
components read it through :meth:`SessionGate.current_session` and request
transitions through :meth:`SessionGate.sign_in` / :meth:`SessionGate.sign_out`.

State machine::

    RESOLVING        -> UNAUTHENTICATED | AUTHENTICATED
    UNAUTHENTICATED  -> AUTHENTICATED     (sign_in)
    AUTHENTICATED    -> UNAUTHENTICATED   (sign_out, session lost)

Resolution happens once; ``RESOLVING`` is never re-entered.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from pydrivesync.exceptions import AuthenticationError, DriveSyncError
from pydrivesync.identity import AuthEvent, IdentityProvider
from pydrivesync.session import Session, SessionSnapshot, SessionState

_logger = logging.getLogger(__name__)

GateListener = Callable[[SessionSnapshot], None]


class Screen(enum.StrEnum):
    """Top-level screens of the application."""

    LOADING = "loading"
    LANDING = "landing"
    LOGIN = "login"
    SHELL = "shell"


def select_screen(state: SessionState, wants_login_screen: bool) -> Screen:
    """Pick the top-level screen for a session state.

    ``wants_login_screen`` is owned by the caller (the landing page's
    "sign in" button), not by the gate.
    """
    if state is SessionState.RESOLVING:
        return Screen.LOADING
    if state is SessionState.UNAUTHENTICATED:
        return Screen.LOGIN if wants_login_screen else Screen.LANDING
    return Screen.SHELL


class SessionGate:
    """Owns session resolution and the sign-in / sign-out transitions."""

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity
        self._state = SessionState.RESOLVING
        self._session: Session | None = None
        self._listeners: list[GateListener] = []
        self._unsubscribe_identity: Callable[[], None] | None = identity.subscribe(self._on_identity_event)

    @property
    def state(self) -> SessionState:
        return self._state

    def current_session(self) -> SessionSnapshot:
        """Resolved state plus identity, without side effects."""
        return SessionSnapshot(state=self._state, session=self._session)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: GateListener) -> Callable[[], None]:
        """Call *listener* with a snapshot after every state change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _transition(self, state: SessionState, session: Session | None) -> None:
        changed = state is not self._state or session != self._session
        if state is not self._state:
            _logger.debug("Session state %s -> %s", self._state, state)
        self._state = state
        self._session = session
        if not changed:
            return
        snapshot = self.current_session()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Gate listener failed", exc_info=True)

    def _on_identity_event(self, event: AuthEvent, session: Session | None) -> None:
        # Resolution is not modeled as re-entrant; resolve() settles the first state.
        if self._state is SessionState.RESOLVING:
            return
        if event is AuthEvent.SIGNED_OUT or session is None:
            if self._state is SessionState.AUTHENTICATED:
                _logger.info("Session lost (%s)", event)
            self._transition(SessionState.UNAUTHENTICATED, None)
            return
        self._transition(SessionState.AUTHENTICATED, session)

    def close(self) -> None:
        """Stop listening to the identity provider."""
        if self._unsubscribe_identity is not None:
            self._unsubscribe_identity()
            self._unsubscribe_identity = None
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def resolve(self) -> SessionSnapshot:
        """Resolve the initial session with the identity provider.

        Any library error during resolution resolves to
        ``UNAUTHENTICATED``. Later calls return the current snapshot.
        """
        if self._state is not SessionState.RESOLVING:
            return self.current_session()
        try:
            session = await self._identity.get_current_session()
        except DriveSyncError as exc:
            _logger.warning("Session resolution failed: %s", exc)
            session = None
        # A sign-in may have settled the state while we were waiting.
        if self._state is SessionState.RESOLVING:
            if session is None:
                self._transition(SessionState.UNAUTHENTICATED, None)
            else:
                self._transition(SessionState.AUTHENTICATED, session)
        return self.current_session()

    async def sign_in(self, identifier: str, secret: str) -> SessionSnapshot:
        """Sign in; raises :class:`AuthenticationError` on failure.

        No retry is attempted. On failure an unresolved gate settles on
        ``UNAUTHENTICATED``; an authenticated gate keeps its session.
        """
        try:
            session = await self._identity.sign_in(identifier, secret)
        except AuthenticationError:
            if self._state is SessionState.RESOLVING:
                self._transition(SessionState.UNAUTHENTICATED, None)
            raise
        self._transition(SessionState.AUTHENTICATED, session)
        return self.current_session()

    async def sign_out(self) -> SessionSnapshot:
        """Sign out; raises :class:`AuthenticationError` on failure.

        The state is not cleared optimistically: a failed sign-out leaves
        the session in place. Signing out without a session is a no-op.
        """
        if self._state is not SessionState.AUTHENTICATED:
            return self.current_session()
        await self._identity.sign_out()
        self._transition(SessionState.UNAUTHENTICATED, None)
        return self.current_session()
