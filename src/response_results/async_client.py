"""Public async client entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from types import TracebackType
from typing import Any, TypeVar

from .client_shared import MapperRegistry, validate_client_config
from .config import ClientConfig, ResultMappingConfig
from .core.async_transport import AsyncTransport
from .core.errors import ClientClosedError, NetworkError
from .core.key_path import KeyPathDecoder
from .core.notifications import UnauthorizedNotifier
from .core.response import ProgressResponse, Response
from .core.results import MappedResult

T = TypeVar("T")


class AsyncResultClient:
    """Async counterpart of ResultClient."""

    def __init__(
        self,
        *,
        config: ClientConfig | None = None,
        transport: AsyncTransport | None = None,
        notifier: UnauthorizedNotifier | None = None,
        decoder: KeyPathDecoder | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        validate_client_config(self._config)

        self._transport = transport or AsyncTransport(self._config)
        self._mappers = MapperRegistry(self._config.mapping, decoder=decoder, notifier=notifier)
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def request(self, method: str, path: str, **kwargs: Any) -> Response:
        self._ensure_open()
        return await self._transport.request(method, path, **kwargs)

    async def request_result(
        self,
        method: str,
        path: str,
        type_: type[T],
        *,
        mapping: ResultMappingConfig | None = None,
        **kwargs: Any,
    ) -> MappedResult[T]:
        self._ensure_open()
        mapper = self._mappers.get(mapping)
        try:
            response = await self._transport.request(method, path, **kwargs)
        except NetworkError as exc:
            return mapper.network_failure(exc)
        return mapper.map_result(response, type_)

    async def request_success(
        self,
        method: str,
        path: str,
        *,
        mapping: ResultMappingConfig | None = None,
        **kwargs: Any,
    ) -> MappedResult[None]:
        self._ensure_open()
        mapper = self._mappers.get(mapping)
        try:
            response = await self._transport.request(method, path, **kwargs)
        except NetworkError as exc:
            return mapper.network_failure(exc)
        return mapper.map_success(response)

    async def get_result(
        self,
        path: str,
        type_: type[T],
        *,
        params: Mapping[str, str] | None = None,
        mapping: ResultMappingConfig | None = None,
    ) -> MappedResult[T]:
        return await self.request_result("GET", path, type_, mapping=mapping, params=params)

    async def post_result(
        self,
        path: str,
        type_: type[T],
        *,
        json: object = None,
        mapping: ResultMappingConfig | None = None,
    ) -> MappedResult[T]:
        return await self.request_result("POST", path, type_, mapping=mapping, json=json)

    async def get_success(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        mapping: ResultMappingConfig | None = None,
    ) -> MappedResult[None]:
        return await self.request_success("GET", path, mapping=mapping, params=params)

    async def get_value(
        self,
        path: str,
        type_: type[T],
        *,
        params: Mapping[str, str] | None = None,
        mapping: ResultMappingConfig | None = None,
    ) -> T:
        self._ensure_open()
        response = await self._transport.request("GET", path, params=params)
        return self._mappers.get(mapping).map_value(response, type_)

    def download(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
    ) -> AsyncIterator[ProgressResponse]:
        self._ensure_open()
        return self._download_guarded(path, params)

    async def _download_guarded(
        self,
        path: str,
        params: Mapping[str, str] | None,
    ) -> AsyncIterator[ProgressResponse]:
        iterator = self._transport.stream_progress("GET", path, params=params).__aiter__()
        try:
            while True:
                self._ensure_open()
                try:
                    step = await iterator.__anext__()
                except StopAsyncIteration:
                    return
                yield step
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("AsyncResultClient is already closed")

    async def close(self) -> None:
        if self._closed:
            return
        await self._transport.close()
        self._closed = True

    async def __aenter__(self) -> "AsyncResultClient":
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False


__all__ = [
    "AsyncResultClient",
]
