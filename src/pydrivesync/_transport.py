"""HTTP transport for the hosted DriveSync services."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pydrivesync._constants import USER_AGENT
from pydrivesync._redact import redact_for_log
from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import DriveSyncTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        bearer: str | None = None,
    ) -> Any:
        ...


class HttpTransport:
    """JSON-over-HTTP transport that attaches the project API key."""

    def __init__(
        self,
        config: DriveSyncConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self, bearer: str | None) -> dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
            "apikey": self._config.api_key,
            "authorization": f"Bearer {bearer or self._config.api_key}",
        }

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        bearer: str | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Returns ``None`` for empty bodies (e.g. ``204 No Content``).
        Non-2xx responses raise :class:`DriveSyncTransportError` carrying
        the decoded error payload when the body is JSON.
        """
        self._config.require_credentials()

        data = json.dumps(json_body, separators=(",", ":")) if json_body is not None else None
        _logger.debug("%s %s params=%s body=%s", method, url, params, redact_for_log(json_body))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=data,
                headers=self._headers(bearer),
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise DriveSyncTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc
        except TimeoutError as exc:
            raise DriveSyncTransportError(
                f"Request to {url} timed out after {self._config.request_timeout}s",
                endpoint=url,
            ) from exc

        payload: Any = None
        if text.strip():
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                if 200 <= status < 300:
                    raise DriveSyncTransportError(
                        f"Invalid JSON from {url}: {text[:200]}",
                        status_code=status,
                        endpoint=url,
                    ) from exc
                payload = None

        if not 200 <= status < 300:
            raise DriveSyncTransportError(
                f"HTTP {status} from {url}: {text[:200]}",
                status_code=status,
                endpoint=url,
                payload=payload,
            )

        _logger.debug("HTTP %s from %s payload=%s", status, url, redact_for_log(payload))
        return payload
