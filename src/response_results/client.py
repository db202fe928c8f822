"""Public client entrypoint."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import TracebackType
from typing import Any, TypeVar

from .client_shared import MapperRegistry, validate_client_config
from .config import ClientConfig, ResultMappingConfig
from .core.errors import ClientClosedError, NetworkError
from .core.key_path import KeyPathDecoder
from .core.notifications import UnauthorizedNotifier
from .core.response import ProgressResponse, Response
from .core.results import MappedResult
from .core.transport import SyncTransport

T = TypeVar("T")


class ResultClient:
    """Request JSON envelopes and map them to results."""

    def __init__(
        self,
        *,
        config: ClientConfig | None = None,
        transport: SyncTransport | None = None,
        notifier: UnauthorizedNotifier | None = None,
        decoder: KeyPathDecoder | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        validate_client_config(self._config)

        self._transport = transport or SyncTransport(self._config)
        self._mappers = MapperRegistry(self._config.mapping, decoder=decoder, notifier=notifier)
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    def request(self, method: str, path: str, **kwargs: Any) -> Response:
        self._ensure_open()
        return self._transport.request(method, path, **kwargs)

    def request_result(
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
            response = self._transport.request(method, path, **kwargs)
        except NetworkError as exc:
            return mapper.network_failure(exc)
        return mapper.map_result(response, type_)

    def request_success(
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
            response = self._transport.request(method, path, **kwargs)
        except NetworkError as exc:
            return mapper.network_failure(exc)
        return mapper.map_success(response)

    def get_result(
        self,
        path: str,
        type_: type[T],
        *,
        params: Mapping[str, str] | None = None,
        mapping: ResultMappingConfig | None = None,
    ) -> MappedResult[T]:
        return self.request_result("GET", path, type_, mapping=mapping, params=params)

    def post_result(
        self,
        path: str,
        type_: type[T],
        *,
        json: object = None,
        mapping: ResultMappingConfig | None = None,
    ) -> MappedResult[T]:
        return self.request_result("POST", path, type_, mapping=mapping, json=json)

    def get_success(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        mapping: ResultMappingConfig | None = None,
    ) -> MappedResult[None]:
        return self.request_success("GET", path, mapping=mapping, params=params)

    def get_value(
        self,
        path: str,
        type_: type[T],
        *,
        params: Mapping[str, str] | None = None,
        mapping: ResultMappingConfig | None = None,
    ) -> T:
        """Like get_result, but failures raise ServiceError/TransportError/NetworkError."""

        self._ensure_open()
        response = self._transport.request("GET", path, params=params)
        return self._mappers.get(mapping).map_value(response, type_)

    def download(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
    ) -> Iterator[ProgressResponse]:
        self._ensure_open()
        iterator = iter(self._transport.stream_progress("GET", path, params=params))
        try:
            while True:
                self._ensure_open()
                try:
                    step = next(iterator)
                except StopIteration:
                    return
                yield step
        finally:
            close = getattr(iterator, "close", None)
            if close is not None:
                close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("ResultClient is already closed")

    def close(self) -> None:
        if self._closed:
            return
        self._transport.close()
        self._closed = True

    def __enter__(self) -> "ResultClient":
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False


__all__ = [
    "ResultClient",
]
