"""Envelope-to-result mapping."""

from __future__ import annotations

import logging
from typing import TypeVar

from ..config import ResultMappingConfig
from .errors import KeyPathDecodeError
from .key_path import JsonKeyPathDecoder, KeyPathDecoder
from .notifications import UNAUTHORIZED_CODE, UnauthorizedNotifier
from .response import Response
from .results import MappedResult, ServiceFailure, Success, TransportFailure

T = TypeVar("T")

logger = logging.getLogger("response_results")


class ResponseResultMapper:
    """Classify one response envelope as success, service or transport failure."""

    def __init__(
        self,
        config: ResultMappingConfig | None = None,
        *,
        decoder: KeyPathDecoder | None = None,
        notifier: UnauthorizedNotifier | None = None,
    ) -> None:
        self._config = config or ResultMappingConfig()
        self._config.validate()
        self._decoder = decoder or JsonKeyPathDecoder()
        self._notifier = notifier

    @property
    def config(self) -> ResultMappingConfig:
        return self._config

    def map_result(self, response: Response, type_: type[T]) -> MappedResult[T]:
        outcome = self._classify(response)
        if not isinstance(outcome, int):
            return outcome
        try:
            value = self._decoder.decode(response.data, type_, self._config.data_key)
        except KeyPathDecodeError as exc:
            logger.warning(
                "payload decode failed data_key=%s http_status=%s error=%s",
                self._config.data_key,
                response.status_code,
                exc,
            )
            return TransportFailure(
                f"request succeeded but payload at '{self._config.data_key}' "
                f"could not be decoded: {exc}",
                cause="decode",
                error=exc,
            )
        return Success(value)

    def map_success(self, response: Response) -> MappedResult[None]:
        outcome = self._classify(response)
        if not isinstance(outcome, int):
            return outcome
        return Success(None)

    def map_value(self, response: Response, type_: type[T]) -> T:
        return self.map_result(response, type_).unwrap()

    def require_success(self, response: Response) -> None:
        self.map_success(response).unwrap()

    def network_failure(self, exc: BaseException) -> TransportFailure:
        message = str(exc) or exc.__class__.__name__
        logger.warning("upstream failed; folding into result error=%s", exc.__class__.__name__)
        return TransportFailure(message, cause="network", error=exc)

    def _classify(self, response: Response) -> int | ServiceFailure | TransportFailure:
        """Return the success code, or the failure the envelope maps to."""

        config = self._config
        try:
            code = _integral_code(self._decoder.decode(response.data, int | float, config.code_key))
        except KeyPathDecodeError:
            logger.debug(
                "envelope unreadable code_key=%s http_status=%s",
                config.code_key,
                response.status_code,
            )
            return TransportFailure(response.text_or_placeholder(), cause="parse")

        if code == UNAUTHORIZED_CODE and self._notifier is not None:
            self._notifier.publish()

        if code != config.success_code:
            try:
                message = self._decoder.decode(response.data, str, config.message_key)
            except KeyPathDecodeError:
                message = ""
            logger.debug("service failure code=%s message=%s", code, message)
            return ServiceFailure(code, message)

        logger.debug("envelope success code=%s", code)
        return code


def _integral_code(value: int | float) -> int:
    if isinstance(value, float):
        if not value.is_integer():
            raise KeyPathDecodeError(f"code {value!r} is not an integer")
        return int(value)
    return value


__all__ = [
    "ResponseResultMapper",
]
