"""Authentication token models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AuthUser(BaseModel):
    """The identity behind a session.

    ``role`` is read from ``user_metadata.role`` (falling back to
    ``app_metadata.role``) and kept as an opaque string.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    email: str = ""
    role: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _extract_role(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        if not merged.get("role") or merged.get("role") == "authenticated":
            for meta_key in ("user_metadata", "app_metadata"):
                meta = values.get(meta_key)
                if isinstance(meta, dict) and meta.get("role"):
                    merged["role"] = str(meta["role"])
                    break
            else:
                merged["role"] = ""
        merged["email"] = str(merged.get("email") or "")
        return merged


class AuthToken(BaseModel):
    """Token set returned by the identity service.

    Parameters
    ----------
    access_token : str
        Bearer token for authenticated requests.
    refresh_token : str
        Token exchanged for a new access token on expiry.
    expires_at : float or None
        Expiry as epoch seconds; derived from ``expires_in`` when the
        service omits it.
    user : AuthUser
        The authenticated identity.
    raw : dict
        Full decoded response for access to additional fields.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str
    refresh_token: str = ""
    expires_at: float | None = None
    user: AuthUser
    raw: dict[str, Any] = Field(default_factory=dict)
