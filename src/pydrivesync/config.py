"""Client configuration for pydrivesync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pydrivesync.exceptions import DriveSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class DriveSyncConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the hosted DriveSync project
        (e.g. ``"https://fleet.example.gov"``).
    api_key : str
        Public (anon) API key sent with every request.
    auth_path : str
        Path prefix of the identity service.
    rest_path : str
        Path prefix of the collection REST service.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    auto_refresh_token : bool
        Refresh an expired access token with the refresh token when the
        current session is requested.
    refresh_margin : float
        Seconds before the real expiry at which a session is already
        treated as expired.
    """

    base_url: str = ""
    api_key: str = ""
    auth_path: str = "/auth/v1"
    rest_path: str = "/rest/v1"
    request_timeout: float = 30.0
    auto_refresh_token: bool = True
    refresh_margin: float = 60.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.base_url.strip()) and bool(self.api_key.strip())

    def require_credentials(self) -> None:
        """Raise :class:`DriveSyncConfigError` unless URL and key are set."""
        missing = []
        if not self.base_url.strip():
            missing.append("base_url (DRIVESYNC_URL)")
        if not self.api_key.strip():
            missing.append("api_key (DRIVESYNC_ANON_KEY)")
        if missing:
            raise DriveSyncConfigError(f"Missing configuration: {', '.join(missing)}")

    def auth_url(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}{self.auth_path}{endpoint}"

    def rest_url(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}{self.rest_path}{endpoint}"

    @classmethod
    def from_env(cls, **overrides: Any) -> DriveSyncConfig:
        """Create configuration from environment variables.

        Reads ``DRIVESYNC_URL``, ``DRIVESYNC_ANON_KEY`` and the optional
        ``DRIVESYNC_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        DriveSyncConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "DRIVESYNC_URL": "base_url",
            "DRIVESYNC_ANON_KEY": "api_key",
            "DRIVESYNC_AUTH_PATH": "auth_path",
            "DRIVESYNC_REST_PATH": "rest_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("DRIVESYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        margin_env = env.get("DRIVESYNC_REFRESH_MARGIN")
        if margin_env is not None and "refresh_margin" not in overrides:
            config_kwargs["refresh_margin"] = float(margin_env)

        if "auto_refresh_token" not in overrides:
            config_kwargs["auto_refresh_token"] = _env_bool(env.get("DRIVESYNC_AUTO_REFRESH_TOKEN"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
