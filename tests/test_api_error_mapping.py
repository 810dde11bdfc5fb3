from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from pydrivesync._api.auth import parse_token_response, sign_in_with_password
from pydrivesync._api.collections import read_collection
from pydrivesync.config import DriveSyncConfig
from pydrivesync.exceptions import AuthenticationError, DriveSyncTransportError, StoreError
from pydrivesync.models.requests import CollectionReadRequest, SignInRequest
from pydrivesync.store import RestStore


class _FixedTransport:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.last: dict[str, Any] = {}

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        bearer: str | None = None,
    ) -> Any:
        self.last = {"method": method, "url": url, "params": dict(params or {}), "bearer": bearer}
        if self._error is not None:
            raise self._error
        return self._response


@pytest.fixture
def config() -> DriveSyncConfig:
    return DriveSyncConfig(base_url="https://fleet.example.gov/", api_key="anon-key")


@pytest.mark.asyncio
async def test_read_collection_builds_rest_query(config: DriveSyncConfig) -> None:
    transport = _FixedTransport([{"id": "d1", "name": "Carlos"}])
    request = CollectionReadRequest(collection="drivers", selection=["id", "name"])

    rows = await read_collection(config, transport, request, access_token="access-1")

    assert rows == [{"id": "d1", "name": "Carlos"}]
    assert transport.last == {
        "method": "GET",
        "url": "https://fleet.example.gov/rest/v1/drivers",
        "params": {"select": "id,name"},
        "bearer": "access-1",
    }


@pytest.mark.asyncio
async def test_read_collection_service_error_uses_service_message(config: DriveSyncConfig) -> None:
    transport = _FixedTransport(
        error=DriveSyncTransportError(
            "HTTP 404 from https://fleet.example.gov/rest/v1/drivrs",
            status_code=404,
            payload={"code": "42P01", "message": 'relation "public.drivrs" does not exist'},
        )
    )
    request = CollectionReadRequest(collection="drivrs")

    with pytest.raises(StoreError) as exc_info:
        await read_collection(config, transport, request)

    exc = exc_info.value
    assert str(exc) == 'relation "public.drivrs" does not exist'
    assert exc.code == "42P01"
    assert exc.endpoint == "/drivrs"


@pytest.mark.asyncio
async def test_read_collection_network_error_keeps_transport_message(config: DriveSyncConfig) -> None:
    transport = _FixedTransport(error=DriveSyncTransportError("Request to x failed: network unreachable"))

    with pytest.raises(StoreError, match="network unreachable") as exc_info:
        await read_collection(config, transport, CollectionReadRequest(collection="drivers"))

    assert exc_info.value.code == ""


@pytest.mark.asyncio
async def test_read_collection_empty_body_is_empty_list(config: DriveSyncConfig) -> None:
    rows = await read_collection(config, _FixedTransport(None), CollectionReadRequest(collection="drivers"))
    assert rows == []


@pytest.mark.asyncio
async def test_read_collection_rejects_scalar_payload(config: DriveSyncConfig) -> None:
    with pytest.raises(StoreError) as exc_info:
        await read_collection(config, _FixedTransport("oops"), CollectionReadRequest(collection="drivers"))
    assert exc_info.value.code == "invalid_payload"


@pytest.mark.asyncio
async def test_store_rejects_invalid_collection_name(config: DriveSyncConfig) -> None:
    transport = _FixedTransport([])
    store = RestStore(config, transport)

    with pytest.raises(StoreError) as exc_info:
        await store.read("drivers;drop")

    assert exc_info.value.code == "invalid_request"
    assert transport.last == {}


@pytest.mark.asyncio
async def test_store_read_first_requests_one_row(config: DriveSyncConfig) -> None:
    transport = _FixedTransport([{"id": "cfg-1", "organization_name": "Prefeitura"}])

    async def _token() -> str | None:
        return None

    store = RestStore(config, transport, token_provider=_token)
    row = await store.read_first("system_config")

    assert row == {"id": "cfg-1", "organization_name": "Prefeitura"}
    assert transport.last["params"] == {"select": "*", "limit": "1"}
    assert transport.last["bearer"] is None


@pytest.mark.asyncio
async def test_sign_in_transport_failure_maps_to_authentication_error(config: DriveSyncConfig) -> None:
    transport = _FixedTransport(error=DriveSyncTransportError("Request to x timed out after 30.0s"))

    with pytest.raises(AuthenticationError, match="timed out"):
        await sign_in_with_password(
            config,
            transport,
            SignInRequest(identifier="admin@example.gov", secret="demo123"),
        )


@pytest.mark.asyncio
async def test_missing_configuration_maps_to_authentication_error() -> None:
    class _ConfigCheckingTransport(_FixedTransport):
        async def request(self, method: str, url: str, **kwargs: Any) -> Any:
            DriveSyncConfig().require_credentials()
            return None

    with pytest.raises(AuthenticationError, match="Missing configuration"):
        await sign_in_with_password(
            DriveSyncConfig(),
            _ConfigCheckingTransport(),
            SignInRequest(identifier="admin@example.gov", secret="demo123"),
        )


def test_parse_token_response_requires_access_token() -> None:
    with pytest.raises(AuthenticationError, match="access_token"):
        parse_token_response({"user": {"id": "user-1"}})


def test_parse_token_response_requires_user() -> None:
    with pytest.raises(AuthenticationError, match="user"):
        parse_token_response({"access_token": "a"})


def test_parse_token_response_prefers_expires_at() -> None:
    token = parse_token_response(
        {"access_token": "a", "expires_at": 1771000000, "expires_in": 3600, "user": {"id": "user-1"}}
    )
    assert token.expires_at == 1771000000.0
    assert token.refresh_token == ""


@pytest.mark.parametrize(
    "body",
    [
        {"access_token": "a", "expires_in": "soon", "user": {"id": "user-1"}},
        {"access_token": "a", "expires_at": "tomorrow", "user": {"id": "user-1"}},
    ],
)
def test_parse_token_response_rejects_non_numeric_expiry(body: dict[str, Any]) -> None:
    with pytest.raises(AuthenticationError, match="Malformed token response") as excinfo:
        parse_token_response(body)
    assert isinstance(excinfo.value.__cause__, ValueError)
