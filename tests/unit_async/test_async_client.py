from __future__ import annotations

import httpx
import pytest
from pydantic import BaseModel

from response_results.async_client import AsyncResultClient
from response_results.config import ResultMappingConfig
from response_results.core.async_transport import AsyncTransport
from response_results.core.errors import ClientClosedError, NetworkError, ServiceError
from response_results.core.response import ProgressResponse, Response
from response_results.core.results import ServiceFailure, Success, TransportFailure
from tests.shared.payloads import envelope_bytes, make_response
from tests.shared.transport import (
    AsyncSequencedTransport,
    async_mock_client,
    build_config,
    mock_handler,
    network_down,
)


class User(BaseModel):
    id: int
    name: str


@pytest.mark.asyncio
async def test_async_client_context_manager_closes_transport():
    transport = AsyncSequencedTransport([])
    async with AsyncResultClient(transport=transport) as client:
        assert client is not None
    assert transport.closed is True


@pytest.mark.asyncio
async def test_async_client_raises_when_used_after_close():
    client = AsyncResultClient(transport=AsyncSequencedTransport([]))
    await client.close()
    with pytest.raises(ClientClosedError):
        await client.get_result("/users/1", User)
    with pytest.raises(ClientClosedError):
        client.download("/files/a")


@pytest.mark.asyncio
async def test_async_client_maps_results(notifier):
    transport = AsyncSequencedTransport(
        [
            make_response(envelope_bytes(data={"id": 1, "name": "ann"})),
            make_response(envelope_bytes(code=401, message="expired")),
            network_down(),
        ]
    )
    client = AsyncResultClient(transport=transport, notifier=notifier)

    assert await client.get_result("/users/1", User) == Success(User(id=1, name="ann"))
    assert await client.get_success("/me") == ServiceFailure(401, "expired")
    failure = await client.post_result("/users", User, json={"name": "x"})

    assert isinstance(failure, TransportFailure)
    assert failure.cause == "network"
    assert notifier.published == 1
    assert transport.calls[2] == ("POST", "/users", {"json": {"name": "x"}})


@pytest.mark.asyncio
async def test_async_get_value_raises():
    client = AsyncResultClient(
        transport=AsyncSequencedTransport(
            [make_response(envelope_bytes(code=409, message="conflict")), network_down()]
        )
    )
    with pytest.raises(ServiceError, match="conflict"):
        await client.get_value("/users/1", User)
    with pytest.raises(NetworkError):
        await client.get_value("/users/1", User)


@pytest.mark.asyncio
async def test_async_download_raises_when_closed_mid_iteration():
    transport = AsyncSequencedTransport(
        [],
        progress=[
            ProgressResponse(progress=0.5),
            ProgressResponse(progress=1.0, response=Response(status_code=200, data=b"z")),
        ],
    )
    client = AsyncResultClient(transport=transport)
    iterator = client.download("/files/a")
    first = await iterator.__anext__()
    assert first.progress == 0.5
    await client.close()
    with pytest.raises(ClientClosedError):
        await iterator.__anext__()


@pytest.mark.asyncio
async def test_async_client_end_to_end_over_httpx_mock_transport():
    routes = {
        "/orders": httpx.Response(200, json={"meta": {"status": 0}, "body": {"id": 7, "name": "order"}}),
    }
    mapping = ResultMappingConfig(data_key="body", code_key="meta.status", message_key="meta.msg", success_code=0)
    config = build_config(mapping=mapping)
    transport = AsyncTransport(config, client=async_mock_client(mock_handler(routes)))
    async with AsyncResultClient(config=config, transport=transport) as client:
        assert await client.get_result("/orders", User) == Success(User(id=7, name="order"))
