"""Shared helpers for the endpoint modules.

This module centralizes the error-payload handling shared by the identity
and collection endpoints. It is internal to pydrivesync and may change at
any time.
"""

from __future__ import annotations

from typing import Any

from pydrivesync.exceptions import DriveSyncTransportError

_MESSAGE_KEYS = ("message", "error_description", "msg", "error")


def error_message(payload: Any, fallback: str) -> str:
    """Pick the human-readable message out of a service error payload."""
    if isinstance(payload, dict):
        for key in _MESSAGE_KEYS:
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback


def error_code(exc: DriveSyncTransportError) -> str:
    """Service error code, else the HTTP status, else ``""``."""
    payload = exc.payload
    if isinstance(payload, dict):
        for key in ("code", "error_code", "error"):
            value = payload.get(key)
            if value not in (None, ""):
                return str(value)
    if exc.status_code is not None:
        return str(exc.status_code)
    return ""


def transport_message(exc: DriveSyncTransportError) -> str:
    """Message to surface for a failed request.

    Network failures carry no payload, so the transport message (which
    includes the underlying client error) is used as-is.
    """
    return error_message(exc.payload, str(exc))
