"""Shared helpers for sync/async client bootstrap."""

from __future__ import annotations

from .config import ClientConfig, ResultMappingConfig
from .core.key_path import KeyPathDecoder
from .core.mapper import ResponseResultMapper
from .core.notifications import UnauthorizedNotifier


def validate_client_config(config: ClientConfig) -> None:
    config.validate()


class MapperRegistry:
    """One mapper per mapping config, sharing decoder and notifier."""

    def __init__(
        self,
        default: ResultMappingConfig,
        *,
        decoder: KeyPathDecoder | None = None,
        notifier: UnauthorizedNotifier | None = None,
    ) -> None:
        self._default = default
        self._decoder = decoder
        self._notifier = notifier
        self._mappers: dict[ResultMappingConfig, ResponseResultMapper] = {}

    def get(self, mapping: ResultMappingConfig | None = None) -> ResponseResultMapper:
        resolved = mapping or self._default
        mapper = self._mappers.get(resolved)
        if mapper is None:
            mapper = ResponseResultMapper(
                resolved,
                decoder=self._decoder,
                notifier=self._notifier,
            )
            self._mappers[resolved] = mapper
        return mapper


__all__ = [
    "validate_client_config",
    "MapperRegistry",
]
