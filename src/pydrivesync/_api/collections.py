"""Collection REST endpoint.

Endpoint:
  - /{collection}?select=...&limit=...
"""

from __future__ import annotations

import logging
from typing import Any

from pydrivesync._api._common import error_code, transport_message
from pydrivesync._transport import Transport
from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import DriveSyncConfigError, DriveSyncTransportError, StoreError
from pydrivesync.models.requests import CollectionReadRequest

_logger = logging.getLogger(__name__)


async def read_collection(
    config: DriveSyncConfig,
    transport: Transport,
    request: CollectionReadRequest,
    *,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    """Read the rows of one collection.

    Returns an empty list when the service returns no body.

    Raises
    ------
    StoreError
        On any transport, configuration or payload failure. The message
        is the service's own message when it sent one.
    """
    endpoint = f"/{request.collection}"
    try:
        response = await transport.request(
            "GET",
            config.rest_url(endpoint),
            params=request.query_params(),
            bearer=access_token,
        )
    except DriveSyncTransportError as exc:
        raise StoreError(transport_message(exc), code=error_code(exc), endpoint=endpoint) from exc
    except DriveSyncConfigError as exc:
        raise StoreError(str(exc), endpoint=endpoint) from exc

    if response is None:
        return []
    if isinstance(response, dict):
        response = [response]
    if not isinstance(response, list):
        raise StoreError(
            f"Unexpected payload from {endpoint}: {type(response).__name__}",
            code="invalid_payload",
            endpoint=endpoint,
        )

    rows = [row for row in response if isinstance(row, dict)]
    _logger.debug("Read %d rows from %s select=%s", len(rows), request.collection, request.selection)
    return rows
