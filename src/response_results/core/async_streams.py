"""Stream operators over async iterables of responses."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterable, AsyncIterator, Callable, Container
from typing import Any, TypeVar

from PIL import Image

from ..config import ResultMappingConfig
from .errors import NetworkError
from .key_path import KeyPathDecoder
from .mapper import ResponseResultMapper
from .notifications import UnauthorizedNotifier
from .response import ProgressResponse, Response
from .results import MappedResult

T = TypeVar("T")
U = TypeVar("U")


async def _alift(
    responses: AsyncIterable[Response],
    operation: Callable[[Response], U],
) -> AsyncIterator[U]:
    async for response in responses:
        yield operation(response)


async def _afold_results(
    responses: AsyncIterable[Response],
    mapper: ResponseResultMapper,
    operation: Callable[[Response], MappedResult[Any]],
) -> AsyncIterator[MappedResult[Any]]:
    iterator = responses.__aiter__()
    while True:
        try:
            response = await iterator.__anext__()
        except StopAsyncIteration:
            return
        except Exception as exc:
            yield mapper.network_failure(exc)
            return
        yield operation(response)


def amap_results(
    responses: AsyncIterable[Response],
    config: ResultMappingConfig,
    type_: type[T],
    *,
    decoder: KeyPathDecoder | None = None,
    notifier: UnauthorizedNotifier | None = None,
) -> AsyncIterator[MappedResult[T]]:
    mapper = ResponseResultMapper(config, decoder=decoder, notifier=notifier)
    return _afold_results(responses, mapper, lambda response: mapper.map_result(response, type_))


def amap_successes(
    responses: AsyncIterable[Response],
    config: ResultMappingConfig,
    *,
    decoder: KeyPathDecoder | None = None,
    notifier: UnauthorizedNotifier | None = None,
) -> AsyncIterator[MappedResult[None]]:
    mapper = ResponseResultMapper(config, decoder=decoder, notifier=notifier)
    return _afold_results(responses, mapper, mapper.map_success)


async def amap_values(
    responses: AsyncIterable[Response],
    config: ResultMappingConfig,
    type_: type[T],
    *,
    decoder: KeyPathDecoder | None = None,
    notifier: UnauthorizedNotifier | None = None,
) -> AsyncIterator[T]:
    mapper = ResponseResultMapper(config, decoder=decoder, notifier=notifier)
    iterator = responses.__aiter__()
    while True:
        try:
            response = await iterator.__anext__()
        except StopAsyncIteration:
            return
        except NetworkError:
            raise
        except Exception as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc
        yield mapper.map_value(response, type_)


def afilter_status_codes(
    responses: AsyncIterable[Response],
    status_codes: Container[int],
) -> AsyncIterator[Response]:
    return _alift(responses, lambda response: response.filter(status_codes))


def afilter_status_code(responses: AsyncIterable[Response], status_code: int) -> AsyncIterator[Response]:
    return _alift(responses, lambda response: response.filter_status_code(status_code))


def afilter_successful_status_codes(responses: AsyncIterable[Response]) -> AsyncIterator[Response]:
    return _alift(responses, Response.filter_successful_status_codes)


def afilter_successful_status_and_redirect_codes(
    responses: AsyncIterable[Response],
) -> AsyncIterator[Response]:
    return _alift(responses, Response.filter_successful_status_and_redirect_codes)


def amap_images(responses: AsyncIterable[Response]) -> AsyncIterator[Image.Image]:
    return _alift(responses, Response.map_image)


def amap_json(
    responses: AsyncIterable[Response],
    *,
    fails_on_empty_data: bool = True,
) -> AsyncIterator[object]:
    return _alift(responses, lambda response: response.map_json(fails_on_empty_data=fails_on_empty_data))


def amap_strings(
    responses: AsyncIterable[Response],
    *,
    at_key_path: str | None = None,
) -> AsyncIterator[str]:
    return _alift(responses, lambda response: response.map_string(at_key_path=at_key_path))


def amap_objects(
    responses: AsyncIterable[Response],
    type_: type[T],
    *,
    at_key_path: str | None = None,
    decoder: KeyPathDecoder | None = None,
    fails_on_empty_data: bool = True,
) -> AsyncIterator[T]:
    return _alift(
        responses,
        lambda response: response.map(
            type_,
            at_key_path=at_key_path,
            decoder=decoder,
            fails_on_empty_data=fails_on_empty_data,
        ),
    )


async def afilter_completed(progress: AsyncIterable[ProgressResponse]) -> AsyncIterator[Response]:
    async for item in progress:
        if item.completed and item.response is not None:
            yield item.response


async def afilter_progress(progress: AsyncIterable[ProgressResponse]) -> AsyncIterator[float]:
    async for item in progress:
        if not item.completed:
            yield item.progress


class _SharedProgress:
    """Buffered fan-out of one async progress stream to two readers."""

    def __init__(self, source: AsyncIterable[ProgressResponse]) -> None:
        self._source = source.__aiter__()
        self._buffers: tuple[deque[ProgressResponse], deque[ProgressResponse]] = (deque(), deque())
        self._lock = asyncio.Lock()
        self._done = False
        self._error: BaseException | None = None

    async def branch(self, index: int) -> AsyncIterator[ProgressResponse]:
        buffer = self._buffers[index]
        while True:
            if buffer:
                yield buffer.popleft()
                continue
            if self._done:
                if self._error is not None:
                    raise self._error
                return
            async with self._lock:
                if buffer or self._done:
                    continue
                try:
                    item = await self._source.__anext__()
                except StopAsyncIteration:
                    self._done = True
                    continue
                except Exception as exc:
                    self._error = exc
                    self._done = True
                    continue
                for pending in self._buffers:
                    pending.append(item)


def asplit_progress(
    progress: AsyncIterable[ProgressResponse],
) -> tuple[AsyncIterator[float], AsyncIterator[Response]]:
    """Derive the in-flight and completed streams from one async progress stream."""

    shared = _SharedProgress(progress)
    return afilter_progress(shared.branch(0)), afilter_completed(shared.branch(1))


__all__ = [
    "amap_results",
    "amap_successes",
    "amap_values",
    "afilter_status_codes",
    "afilter_status_code",
    "afilter_successful_status_codes",
    "afilter_successful_status_and_redirect_codes",
    "amap_images",
    "amap_json",
    "amap_strings",
    "amap_objects",
    "afilter_completed",
    "afilter_progress",
    "asplit_progress",
]
