from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import BaseModel

from response_results.core.errors import (
    JsonMappingError,
    NetworkError,
    ServiceError,
    StatusCodeError,
)
from response_results.core.response import ProgressResponse, Response
from response_results.core.results import ServiceFailure, Success, TransportFailure
from response_results.core.streams import (
    filter_completed,
    filter_progress,
    filter_status_code,
    filter_status_codes,
    filter_successful_status_and_redirect_codes,
    filter_successful_status_codes,
    map_images,
    map_json,
    map_objects,
    map_results,
    map_strings,
    map_successes,
    map_values,
    split_progress,
)
from tests.shared.payloads import envelope_bytes, make_response, png_bytes


class Item(BaseModel):
    id: int


def _failing_after(responses: list[Response], error: Exception) -> Iterator[Response]:
    yield from responses
    raise error


def test_map_results_maps_each_response(mapping_config, notifier):
    responses = [
        make_response(envelope_bytes(data={"id": 1})),
        make_response(envelope_bytes(code=401, message="expired")),
        make_response("not json"),
    ]
    results = list(map_results(responses, mapping_config, Item, notifier=notifier))
    assert results == [
        Success(Item(id=1)),
        ServiceFailure(401, "expired"),
        TransportFailure("not json", cause="parse"),
    ]
    assert notifier.published == 1


def test_map_results_folds_upstream_error_and_completes(mapping_config):
    error = ConnectionError("reset by peer")
    upstream = _failing_after([make_response(envelope_bytes(data={"id": 2}))], error)
    results = list(map_results(upstream, mapping_config, Item))
    assert results == [
        Success(Item(id=2)),
        TransportFailure("reset by peer", cause="network", error=error),
    ]


def test_map_successes_folds_upstream_error(mapping_config):
    upstream = _failing_after([make_response(envelope_bytes())], NetworkError("down"))
    results = list(map_successes(upstream, mapping_config))
    assert results[0] == Success(None)
    assert isinstance(results[1], TransportFailure)
    assert results[1].cause == "network"


def test_map_values_yields_payloads_and_raises_on_failure(mapping_config):
    responses = [
        make_response(envelope_bytes(data={"id": 1})),
        make_response(envelope_bytes(code=403, message="forbidden")),
    ]
    stream = map_values(responses, mapping_config, Item)
    assert next(stream) == Item(id=1)
    with pytest.raises(ServiceError):
        next(stream)


def test_map_values_raises_network_error_for_upstream_failure(mapping_config):
    error = TimeoutError("timed out")
    stream = map_values(_failing_after([], error), mapping_config, Item)
    with pytest.raises(NetworkError) as excinfo:
        next(stream)
    assert excinfo.value.__cause__ is error


def test_map_values_passes_network_errors_through(mapping_config):
    original = NetworkError("already mapped")
    stream = map_values(_failing_after([], original), mapping_config, Item)
    with pytest.raises(NetworkError) as excinfo:
        next(stream)
    assert excinfo.value is original


def test_result_streams_are_lazy(mapping_config):
    consumed: list[int] = []

    def _source() -> Iterator[Response]:
        for index in range(3):
            consumed.append(index)
            yield make_response(envelope_bytes(data={"id": index}))

    stream = map_results(_source(), mapping_config, Item)
    assert consumed == []
    next(stream)
    assert consumed == [0]


def test_status_filters_pass_matching_and_stop_on_first_failure():
    responses = [Response(status_code=200), Response(status_code=204), Response(status_code=500)]
    stream = filter_successful_status_codes(responses)
    assert [r.status_code for r in (next(stream), next(stream))] == [200, 204]
    with pytest.raises(StatusCodeError):
        next(stream)


def test_other_status_filters():
    assert [r.status_code for r in filter_status_codes([Response(status_code=404)], range(400, 500))] == [404]
    assert [r.status_code for r in filter_status_code([Response(status_code=201)], 201)] == [201]
    assert [
        r.status_code for r in filter_successful_status_and_redirect_codes([Response(status_code=301)])
    ] == [301]
    with pytest.raises(StatusCodeError):
        list(filter_status_code([Response(status_code=200)], 201))


def test_map_operators_apply_response_operations():
    assert list(map_json([make_response('{"a": 1}')])) == [{"a": 1}]
    assert list(map_json([make_response(b"")], fails_on_empty_data=False)) == [None]
    assert list(map_strings([make_response('{"m": "hi"}')], at_key_path="m")) == ["hi"]
    assert list(map_objects([make_response('{"data": {"id": 5}}')], Item, at_key_path="data")) == [Item(id=5)]
    images = list(map_images([make_response(png_bytes((1, 1)))]))
    assert images[0].size == (1, 1)


def test_map_operator_failure_terminates_stream():
    stream = map_json([make_response('{"a": 1}'), make_response("broken"), make_response("{}")])
    assert next(stream) == {"a": 1}
    with pytest.raises(JsonMappingError):
        next(stream)
    with pytest.raises(StopIteration):
        next(stream)


def _progress_events() -> list[ProgressResponse]:
    final = Response(status_code=200, data=b"done")
    return [
        ProgressResponse(progress=0.25),
        ProgressResponse(progress=0.5),
        ProgressResponse(progress=1.0, response=final),
    ]


def test_filter_progress_and_completed():
    events = _progress_events()
    assert list(filter_progress(events)) == [0.25, 0.5]
    assert [r.data for r in filter_completed(events)] == [b"done"]


def test_split_progress_reads_the_source_once():
    pulls: list[float] = []

    def _source() -> Iterator[ProgressResponse]:
        for event in _progress_events():
            pulls.append(event.progress)
            yield event

    in_flight, completed = split_progress(_source())
    assert list(in_flight) == [0.25, 0.5]
    assert [r.data for r in completed] == [b"done"]
    assert pulls == [0.25, 0.5, 1.0]


def test_map_results_keeps_deeply_nested_body_inside_the_result(mapping_config):
    deep = make_response("[" * 200_000 + "]" * 200_000)
    results = list(map_results([deep, make_response(envelope_bytes(data={"id": 4}))], mapping_config, Item))
    assert isinstance(results[0], TransportFailure)
    assert results[0].cause == "parse"
    assert results[1] == Success(Item(id=4))
