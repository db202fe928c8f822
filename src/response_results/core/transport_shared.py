"""Shared helpers for sync/async transport implementations."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from ..config import ClientConfig
from .errors import NetworkError
from .response import ProgressResponse, Response


def build_default_headers(config: ClientConfig) -> Mapping[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": config.user_agent,
    }


def build_default_timeout(config: ClientConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.transport.timeout_connect_seconds,
        read=config.transport.timeout_read_seconds,
        write=config.transport.timeout_write_seconds,
        pool=config.transport.timeout_pool_seconds,
    )


def normalize_base_url(base_url: str) -> str:
    if not base_url:
        return ""
    return base_url.rstrip("/") + "/"


def normalize_path(path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return path.lstrip("/")


def content_length(headers: Mapping[str, str]) -> int | None:
    raw = headers.get("content-length")
    if raw is None:
        return None
    text = raw.strip()
    if not text.isdigit():
        return None
    value = int(text)
    return value if value > 0 else None


def progress_step(downloaded: int, total: int | None) -> ProgressResponse:
    if total is None:
        return ProgressResponse(progress=0.0)
    return ProgressResponse(progress=min(downloaded / total, 1.0))


def completed_step(raw: httpx.Response, body: bytes) -> ProgressResponse:
    return ProgressResponse(
        progress=1.0,
        response=Response(
            status_code=raw.status_code,
            data=body,
            headers=dict(raw.headers),
            request=raw.request,
        ),
    )


def network_error(exc: httpx.HTTPError) -> NetworkError:
    detail = str(exc) or exc.__class__.__name__
    return NetworkError(f"network/transport error: {detail}")


__all__ = [
    "build_default_headers",
    "build_default_timeout",
    "normalize_base_url",
    "normalize_path",
    "content_length",
    "progress_step",
    "completed_step",
    "network_error",
]
