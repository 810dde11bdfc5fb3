"""Collection fetcher: a read-only, re-triggerable view of one collection.

A fetcher is bound to a ``(collection, selection, refresh_keys)`` triple.
Activating it, and every change of that triple by value, issues exactly
one read against the remote store. Results are applied under a request
sequence guard: each read captures a monotonically increasing number when
issued and only the latest issued read may write the result. Late
responses from superseded reads are discarded regardless of the order in
which they complete.

While a read is in flight the previous rows stay visible
(stale-while-revalidate). A failed read keeps the last known rows and
exposes the failure message as ``error``.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

from pydrivesync._constants import ALL_FIELDS
from pydrivesync.exceptions import DriveSyncError
from pydrivesync.models._base import DriveSyncModel
from pydrivesync.models.requests import normalize_selection
from pydrivesync.store import RemoteStore, Selection, parse_rows

_logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")

_UNKNOWN_ERROR = "Unknown error"


@dataclasses.dataclass(frozen=True)
class FetchResult(Generic[RowT]):
    """Snapshot exposed to the consuming screen."""

    rows: list[RowT] = dataclasses.field(default_factory=list)
    loading: bool = False
    error: str | None = None


FetchListener = Callable[[FetchResult[Any]], None]


class CollectionFetcher(Generic[RowT]):
    """Single-shot reads of one collection with loading/error observability.

    Usage::

        fetcher = CollectionFetcher(store, "drivers", "id,name")
        await fetcher.activate()
        fetcher.result.rows

    Pass *row_model* to validate rows into typed models; a row that fails
    validation fails the whole read.
    """

    def __init__(
        self,
        store: RemoteStore,
        collection: str,
        selection: Selection = ALL_FIELDS,
        *,
        refresh_keys: Sequence[Any] = (),
        row_model: type[DriveSyncModel] | None = None,
    ) -> None:
        self._store = store
        self._collection = collection
        self._selection = normalize_selection(selection)
        self._refresh_keys = tuple(refresh_keys)
        self._row_model = row_model
        self._result: FetchResult[RowT] = FetchResult()
        self._issued = 0
        self._activated = False
        self._closed = False
        self._pending: set[asyncio.Task[FetchResult[RowT]]] = set()
        self._latest: asyncio.Task[FetchResult[RowT]] | None = None
        self._listeners: list[FetchListener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def selection(self) -> str:
        return self._selection

    @property
    def refresh_keys(self) -> tuple[Any, ...]:
        return self._refresh_keys

    @property
    def result(self) -> FetchResult[RowT]:
        return self._result

    @property
    def rows(self) -> list[RowT]:
        return self._result.rows

    @property
    def loading(self) -> bool:
        return self._result.loading

    @property
    def error(self) -> str | None:
        return self._result.error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def issued_requests(self) -> int:
        """Number of reads issued so far."""
        return self._issued

    def subscribe(self, listener: FetchListener) -> Callable[[], None]:
        """Call *listener* with the new result after every change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set_result(self, result: FetchResult[RowT]) -> None:
        if result == self._result:
            return
        self._result = result
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                _logger.debug("Fetch listener failed for %s", self._collection, exc_info=True)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def activate(self) -> asyncio.Task[FetchResult[RowT]] | None:
        """Issue the first read; later calls return the in-flight read, if any."""
        self._ensure_open()
        if self._activated:
            return self._latest if self._latest is not None and not self._latest.done() else None
        self._activated = True
        return self._issue()

    def update(
        self,
        *,
        collection: str | None = None,
        selection: Selection | None = None,
        refresh_keys: Sequence[Any] | None = None,
    ) -> asyncio.Task[FetchResult[RowT]] | None:
        """Change the dependencies; re-reads only when they differ by value.

        Before activation the new dependencies are only recorded.
        """
        self._ensure_open()
        new_collection = collection if collection is not None else self._collection
        new_selection = normalize_selection(selection) if selection is not None else self._selection
        new_keys = tuple(refresh_keys) if refresh_keys is not None else self._refresh_keys

        if (new_collection, new_selection, new_keys) == (self._collection, self._selection, self._refresh_keys):
            return None

        self._collection = new_collection
        self._selection = new_selection
        self._refresh_keys = new_keys
        if not self._activated:
            return None
        return self._issue()

    def refetch(self) -> asyncio.Task[FetchResult[RowT]]:
        """Re-issue the current read outside the dependency trigger."""
        self._ensure_open()
        self._activated = True
        return self._issue()

    async def wait(self) -> FetchResult[RowT]:
        """Wait for the latest issued read to settle and return the result."""
        while self._latest is not None and not self._latest.done():
            latest = self._latest
            try:
                await asyncio.shield(latest)
            except asyncio.CancelledError:
                # Only swallow the cancellation of a read discarded by close().
                if not latest.cancelled():
                    raise
                break
        return self._result

    def close(self) -> None:
        """Discard the fetcher: cancel in-flight reads, ignore late results."""
        if self._closed:
            return
        self._closed = True
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
        self._listeners.clear()
        if self._result.loading:
            self._set_result(dataclasses.replace(self._result, loading=False))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Fetcher for {self._collection!r} is closed")

    def _is_current(self, seq: int) -> bool:
        return not self._closed and seq == self._issued

    def _issue(self) -> asyncio.Task[FetchResult[RowT]]:
        self._issued += 1
        seq = self._issued
        self._set_result(dataclasses.replace(self._result, loading=True))
        _logger.debug(
            "Fetch #%d of %s select=%s keys=%r",
            seq,
            self._collection,
            self._selection,
            self._refresh_keys,
        )
        task = asyncio.create_task(
            self._run(seq, self._collection, self._selection),
            name=f"pydrivesync-fetch-{self._collection}-{seq}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self._latest = task
        return task

    async def _run(self, seq: int, collection: str, selection: str) -> FetchResult[RowT]:
        try:
            raw_rows = await self._store.read(collection, selection)
            rows: list[Any] = list(raw_rows or [])
            if self._row_model is not None:
                rows = parse_rows(self._row_model, rows)
        except Exception as exc:
            message = str(exc) or _UNKNOWN_ERROR
            if not self._is_current(seq):
                _logger.debug("Discarding stale failure #%d of %s: %s", seq, collection, message)
                return self._result
            if isinstance(exc, DriveSyncError):
                _logger.warning("Fetching %s failed: %s", collection, message)
            else:
                _logger.error("Unexpected error fetching %s", collection, exc_info=True)
            self._set_result(FetchResult(rows=self._result.rows, loading=False, error=message))
            return self._result

        if not self._is_current(seq):
            _logger.debug("Discarding stale result #%d of %s (latest #%d)", seq, collection, self._issued)
            return self._result
        self._set_result(FetchResult(rows=rows, loading=False, error=None))
        return self._result
