"""Async HTTP transport producing raw responses."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..config import ClientConfig
from .errors import NetworkError
from .response import ProgressResponse, Response
from .transport_shared import (
    build_default_headers,
    build_default_timeout,
    completed_step,
    content_length,
    network_error,
    normalize_base_url,
    normalize_path,
    progress_step,
)

logger = logging.getLogger("response_results")


class AsyncTransport:
    """Asynchronous transport over httpx.AsyncClient."""

    def __init__(self, config: ClientConfig, *, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._closed = False
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=normalize_base_url(config.base_url),
            headers=build_default_headers(config),
            timeout=build_default_timeout(config),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            await self._client.aclose()

    async def request(self, method: str, path: str, **kwargs: Any) -> Response:
        self._ensure_open()
        normalized_path = normalize_path(path)
        logger.debug("request start method=%s path=%s", method, normalized_path)
        try:
            raw = await self._client.request(method, normalized_path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(
                "request network error method=%s path=%s error=%s",
                method,
                normalized_path,
                exc.__class__.__name__,
            )
            raise network_error(exc) from exc
        logger.debug(
            "response received method=%s path=%s http_status=%s",
            method,
            normalized_path,
            raw.status_code,
        )
        return Response.from_httpx(raw)

    async def stream_progress(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> AsyncIterator[ProgressResponse]:
        self._ensure_open()
        normalized_path = normalize_path(path)
        logger.debug("download start method=%s path=%s", method, normalized_path)
        try:
            async with self._client.stream(method, normalized_path, **kwargs) as raw:
                total = content_length(raw.headers)
                chunks: list[bytes] = []
                async for chunk in raw.aiter_bytes(chunk_size=self._config.download_chunk_size):
                    chunks.append(chunk)
                    yield progress_step(raw.num_bytes_downloaded, total)
                body = b"".join(chunks)
                logger.debug(
                    "download finished method=%s path=%s http_status=%s bytes=%s",
                    method,
                    normalized_path,
                    raw.status_code,
                    len(body),
                )
                yield completed_step(raw, body)
        except httpx.HTTPError as exc:
            logger.error(
                "download network error method=%s path=%s error=%s",
                method,
                normalized_path,
                exc.__class__.__name__,
            )
            raise network_error(exc) from exc

    def _ensure_open(self) -> None:
        if self._closed:
            raise NetworkError("transport is already closed")


__all__ = [
    "AsyncTransport",
]
