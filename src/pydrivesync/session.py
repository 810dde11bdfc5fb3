"""Session state for the authenticated actor."""

from __future__ import annotations

import enum
import time

from pydantic import BaseModel, ConfigDict, Field

from pydrivesync.models.token import AuthToken, AuthUser

#: Fallback access-token lifetime in seconds when the service reports none.
DEFAULT_SESSION_TTL: float = 3600


class SessionState(enum.StrEnum):
    """Resolution state of the current session."""

    RESOLVING = "resolving"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    """Immutable session issued by the identity provider.

    Parameters
    ----------
    user : AuthUser
        The authenticated identity.
    access_token : str
        Bearer token sent with store reads.
    refresh_token : str
        Token used to obtain a fresh access token.
    expires_at : float
        Expiry as epoch seconds (``time.time()`` clock).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    user: AuthUser
    access_token: str
    refresh_token: str = ""
    expires_at: float = Field(default_factory=lambda: time.time() + DEFAULT_SESSION_TTL)

    @classmethod
    def from_token(cls, token: AuthToken) -> Session:
        expires_at = token.expires_at if token.expires_at is not None else time.time() + DEFAULT_SESSION_TTL
        return cls(
            user=token.user,
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            expires_at=expires_at,
        )

    @property
    def user_id(self) -> str:
        return self.user.id

    def is_expired(self, margin: float = 0.0) -> bool:
        """Whether the access token is past (or within *margin* of) expiry."""
        return time.time() + margin >= self.expires_at


class SessionSnapshot(BaseModel):
    """Read-only view of the gate: resolution state plus identity."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    session: Session | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def user_id(self) -> str | None:
        return self.session.user.id if self.session is not None else None

    @property
    def email(self) -> str | None:
        return self.session.user.email if self.session is not None else None

    @property
    def role(self) -> str | None:
        return self.session.user.role if self.session is not None else None
