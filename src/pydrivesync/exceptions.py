"""Custom exception hierarchy for pydrivesync."""

from __future__ import annotations

from typing import Any


class DriveSyncError(Exception):
    """Base exception for all pydrivesync errors."""


class DriveSyncConfigError(DriveSyncError):
    """Invalid or missing configuration."""


class DriveSyncTransportError(DriveSyncError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.payload = payload
        super().__init__(message)


class DriveSyncApiError(DriveSyncError):
    """The hosted service rejected a request (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class AuthenticationError(DriveSyncApiError):
    """Sign-in, sign-out or token refresh failed.

    Invalid credentials and an unreachable identity provider are not
    distinguished; both surface as this error.
    """


class StoreError(DriveSyncApiError):
    """A collection read failed.

    The message is human readable and is what the fetcher exposes as its
    error text.
    """
