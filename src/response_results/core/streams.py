"""Stream operators over iterables of responses."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Container, Iterable, Iterator
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


def _lift(responses: Iterable[Response], operation: Callable[[Response], U]) -> Iterator[U]:
    for response in responses:
        yield operation(response)


def _fold_results(
    responses: Iterable[Response],
    mapper: ResponseResultMapper,
    operation: Callable[[Response], MappedResult[Any]],
) -> Iterator[MappedResult[Any]]:
    iterator = iter(responses)
    while True:
        try:
            response = next(iterator)
        except StopIteration:
            return
        except Exception as exc:
            yield mapper.network_failure(exc)
            return
        yield operation(response)


def map_results(
    responses: Iterable[Response],
    config: ResultMappingConfig,
    type_: type[T],
    *,
    decoder: KeyPathDecoder | None = None,
    notifier: UnauthorizedNotifier | None = None,
) -> Iterator[MappedResult[T]]:
    """Map each response to a result; an upstream error becomes a final failure."""

    mapper = ResponseResultMapper(config, decoder=decoder, notifier=notifier)
    return _fold_results(responses, mapper, lambda response: mapper.map_result(response, type_))


def map_successes(
    responses: Iterable[Response],
    config: ResultMappingConfig,
    *,
    decoder: KeyPathDecoder | None = None,
    notifier: UnauthorizedNotifier | None = None,
) -> Iterator[MappedResult[None]]:
    mapper = ResponseResultMapper(config, decoder=decoder, notifier=notifier)
    return _fold_results(responses, mapper, mapper.map_success)


def map_values(
    responses: Iterable[Response],
    config: ResultMappingConfig,
    type_: type[T],
    *,
    decoder: KeyPathDecoder | None = None,
    notifier: UnauthorizedNotifier | None = None,
) -> Iterator[T]:
    """Like map_results, but failures are raised instead of yielded."""

    mapper = ResponseResultMapper(config, decoder=decoder, notifier=notifier)
    iterator = iter(responses)
    while True:
        try:
            response = next(iterator)
        except StopIteration:
            return
        except NetworkError:
            raise
        except Exception as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc
        yield mapper.map_value(response, type_)


def filter_status_codes(responses: Iterable[Response], status_codes: Container[int]) -> Iterator[Response]:
    return _lift(responses, lambda response: response.filter(status_codes))


def filter_status_code(responses: Iterable[Response], status_code: int) -> Iterator[Response]:
    return _lift(responses, lambda response: response.filter_status_code(status_code))


def filter_successful_status_codes(responses: Iterable[Response]) -> Iterator[Response]:
    return _lift(responses, Response.filter_successful_status_codes)


def filter_successful_status_and_redirect_codes(responses: Iterable[Response]) -> Iterator[Response]:
    return _lift(responses, Response.filter_successful_status_and_redirect_codes)


def map_images(responses: Iterable[Response]) -> Iterator[Image.Image]:
    return _lift(responses, Response.map_image)


def map_json(responses: Iterable[Response], *, fails_on_empty_data: bool = True) -> Iterator[object]:
    return _lift(responses, lambda response: response.map_json(fails_on_empty_data=fails_on_empty_data))


def map_strings(responses: Iterable[Response], *, at_key_path: str | None = None) -> Iterator[str]:
    return _lift(responses, lambda response: response.map_string(at_key_path=at_key_path))


def map_objects(
    responses: Iterable[Response],
    type_: type[T],
    *,
    at_key_path: str | None = None,
    decoder: KeyPathDecoder | None = None,
    fails_on_empty_data: bool = True,
) -> Iterator[T]:
    return _lift(
        responses,
        lambda response: response.map(
            type_,
            at_key_path=at_key_path,
            decoder=decoder,
            fails_on_empty_data=fails_on_empty_data,
        ),
    )


def filter_completed(progress: Iterable[ProgressResponse]) -> Iterator[Response]:
    for item in progress:
        if item.completed and item.response is not None:
            yield item.response


def filter_progress(progress: Iterable[ProgressResponse]) -> Iterator[float]:
    for item in progress:
        if not item.completed:
            yield item.progress


def split_progress(
    progress: Iterable[ProgressResponse],
) -> tuple[Iterator[float], Iterator[Response]]:
    """Derive the in-flight and completed streams from one progress stream."""

    in_flight, finished = itertools.tee(progress, 2)
    return filter_progress(in_flight), filter_completed(finished)


__all__ = [
    "map_results",
    "map_successes",
    "map_values",
    "filter_status_codes",
    "filter_status_code",
    "filter_successful_status_codes",
    "filter_successful_status_and_redirect_codes",
    "map_images",
    "map_json",
    "map_strings",
    "map_objects",
    "filter_completed",
    "filter_progress",
    "split_progress",
]
