"""Masking of credentials in logged request and response bodies."""

from __future__ import annotations

from typing import Any

REDACTED = "<redacted>"

# Lower-cased JSON field names whose values never reach the logs.
SECRET_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "apikey",
        "authorization",
        "access_token",
        "refresh_token",
        "provider_token",
        "provider_refresh_token",
    }
)


def _shorten(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…<truncated>"


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Copy a decoded JSON body with secret fields masked.

    Field names are compared case-insensitively against
    :data:`SECRET_FIELDS` at every nesting level. Strings longer than
    *max_string* are cut so a large row dump stays readable.
    """
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SECRET_FIELDS else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str):
        return _shorten(value, max_string)
    return value
