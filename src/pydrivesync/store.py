"""Remote store: read access to the hosted collections."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol, TypeVar

from pydantic import ValidationError

from pydrivesync._api.collections import read_collection
from pydrivesync._constants import ALL_FIELDS
from pydrivesync._transport import Transport
from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import StoreError
from pydrivesync.models._base import DriveSyncModel
from pydrivesync.models.requests import CollectionReadRequest

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=DriveSyncModel)

Selection = str | Sequence[str]


class RemoteStore(Protocol):
    """Structural interface consumed by :class:`pydrivesync.fetcher.CollectionFetcher`."""

    async def read(self, collection: str, selection: Selection = ALL_FIELDS) -> list[dict[str, Any]]:
        ...

    async def read_first(self, collection: str, selection: Selection = ALL_FIELDS) -> dict[str, Any] | None:
        ...


def build_read_request(
    collection: str,
    selection: Selection = ALL_FIELDS,
    *,
    limit: int | None = None,
) -> CollectionReadRequest:
    """Validate a read, converting validation failures to :class:`StoreError`."""
    try:
        return CollectionReadRequest(collection=collection, selection=selection, limit=limit)
    except ValidationError as exc:
        raise StoreError(f"Invalid read of {collection!r}: {exc.errors()[0]['msg']}", code="invalid_request") from exc


def parse_rows(model: type[ModelT], rows: Sequence[dict[str, Any]]) -> list[ModelT]:
    """Validate raw rows into *model*; any invalid row fails the whole read."""
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as exc:
        raise StoreError(
            f"Invalid {model.__name__} row: {exc.errors()[0]['msg']}",
            code="invalid_row",
            endpoint=f"/{model.COLLECTION}",
        ) from exc


class RestStore:
    """Remote store backed by the collection REST service.

    Reads are sent with the signed-in user's access token when
    *token_provider* yields one, and with the project API key otherwise.
    """

    def __init__(
        self,
        config: DriveSyncConfig,
        transport: Transport,
        *,
        token_provider: Callable[[], Awaitable[str | None]] | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._token_provider = token_provider

    async def _access_token(self) -> str | None:
        if self._token_provider is None:
            return None
        return await self._token_provider()

    async def read(self, collection: str, selection: Selection = ALL_FIELDS) -> list[dict[str, Any]]:
        """Read every row of *collection* with the given field selection."""
        request = build_read_request(collection, selection)
        return await read_collection(
            self._config,
            self._transport,
            request,
            access_token=await self._access_token(),
        )

    async def read_first(self, collection: str, selection: Selection = ALL_FIELDS) -> dict[str, Any] | None:
        """Read a single row (whichever the service returns first)."""
        request = build_read_request(collection, selection, limit=1)
        rows = await read_collection(
            self._config,
            self._transport,
            request,
            access_token=await self._access_token(),
        )
        return rows[0] if rows else None

    async def read_models(self, model: type[ModelT]) -> list[ModelT]:
        """Read all rows of ``model.COLLECTION`` as typed models."""
        rows = await self.read(model.COLLECTION)
        _logger.debug("Parsing %d %s rows as %s", len(rows), model.COLLECTION, model.__name__)
        return parse_rows(model, rows)
