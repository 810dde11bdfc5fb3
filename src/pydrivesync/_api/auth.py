"""Identity service endpoints.

Endpoints:
  - /token?grant_type=password
  - /token?grant_type=refresh_token
  - /logout
"""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import ValidationError

from pydrivesync._api._common import error_code, transport_message
from pydrivesync._constants import LOGOUT_ENDPOINT, TOKEN_ENDPOINT
from pydrivesync._redact import redact_for_log
from pydrivesync._transport import Transport
from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import AuthenticationError, DriveSyncConfigError, DriveSyncTransportError
from pydrivesync.models.requests import SignInRequest
from pydrivesync.models.token import AuthToken

_logger = logging.getLogger(__name__)


def parse_token_response(response: Any, *, endpoint: str = TOKEN_ENDPOINT) -> AuthToken:
    """Parse a token response into an :class:`AuthToken`.

    Parameters
    ----------
    response : Any
        Decoded JSON body of the token endpoint.
    endpoint : str
        Endpoint name used in error messages.

    Returns
    -------
    AuthToken
        The parsed token set.

    Raises
    ------
    AuthenticationError
        If the response is missing the access token or the user.
    """
    _logger.debug("Token response parsed=%s", redact_for_log(response))
    if not isinstance(response, dict) or not response.get("access_token"):
        raise AuthenticationError("Token response missing access_token", endpoint=endpoint)

    user = response.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        raise AuthenticationError("Token response missing user", endpoint=endpoint)

    try:
        expires_at = response.get("expires_at")
        if expires_at is None and response.get("expires_in") is not None:
            expires_at = time.time() + float(response["expires_in"])
        return AuthToken(
            access_token=str(response["access_token"]),
            refresh_token=str(response.get("refresh_token") or ""),
            expires_at=float(expires_at) if expires_at is not None else None,
            user=user,
            raw=response,
        )
    except (ValidationError, TypeError, ValueError) as exc:
        raise AuthenticationError(f"Malformed token response: {exc}", endpoint=endpoint) from exc


async def _post_token(
    config: DriveSyncConfig,
    transport: Transport,
    grant_type: str,
    body: dict[str, str],
) -> AuthToken:
    endpoint = f"{TOKEN_ENDPOINT}?grant_type={grant_type}"
    try:
        response = await transport.request(
            "POST",
            config.auth_url(TOKEN_ENDPOINT),
            params={"grant_type": grant_type},
            json_body=body,
        )
    except DriveSyncTransportError as exc:
        raise AuthenticationError(
            f"Token request ({grant_type}) failed: {transport_message(exc)}",
            code=error_code(exc),
            endpoint=endpoint,
        ) from exc
    except DriveSyncConfigError as exc:
        raise AuthenticationError(str(exc), endpoint=endpoint) from exc
    return parse_token_response(response, endpoint=endpoint)


async def sign_in_with_password(
    config: DriveSyncConfig,
    transport: Transport,
    request: SignInRequest,
) -> AuthToken:
    """Exchange email + password for a token set."""
    return await _post_token(
        config,
        transport,
        "password",
        {"email": request.identifier, "password": request.secret},
    )


async def refresh_token(
    config: DriveSyncConfig,
    transport: Transport,
    token: str,
) -> AuthToken:
    """Exchange a refresh token for a new token set."""
    if not token:
        raise AuthenticationError("No refresh token available", endpoint=TOKEN_ENDPOINT)
    return await _post_token(config, transport, "refresh_token", {"refresh_token": token})


async def sign_out(
    config: DriveSyncConfig,
    transport: Transport,
    access_token: str,
) -> None:
    """Revoke the session behind *access_token*."""
    try:
        await transport.request(
            "POST",
            config.auth_url(LOGOUT_ENDPOINT),
            bearer=access_token,
        )
    except DriveSyncTransportError as exc:
        raise AuthenticationError(
            f"Sign-out failed: {transport_message(exc)}",
            code=error_code(exc),
            endpoint=LOGOUT_ENDPOINT,
        ) from exc
    except DriveSyncConfigError as exc:
        raise AuthenticationError(str(exc), endpoint=LOGOUT_ENDPOINT) from exc
