"""Error types raised by response operations and result unwrapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import Response


class ResponseResultError(Exception):
    """Base exception for this package."""

    def __init__(
        self,
        message: str,
        *,
        response: "Response | None" = None,
        http_status: int | None = None,
        cause: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        if http_status is None and response is not None:
            http_status = response.status_code
        self.http_status = http_status
        self.cause = cause


class StatusCodeError(ResponseResultError):
    """HTTP status outside of the accepted codes."""


class ImageMappingError(ResponseResultError):
    """Body could not be decoded as an image."""


class JsonMappingError(ResponseResultError):
    """Body could not be parsed as JSON."""


class StringMappingError(ResponseResultError):
    """Body or key path value is not a string."""


class ObjectMappingError(ResponseResultError):
    """Value could not be decoded into the requested type."""


class KeyPathDecodeError(ObjectMappingError):
    """Key path lookup or typed decode failed."""

    def __init__(
        self,
        message: str,
        *,
        key_path: str | None = None,
        response: "Response | None" = None,
        cause: str | None = None,
    ) -> None:
        super().__init__(message, response=response, cause=cause)
        self.key_path = key_path


class ServiceError(ResponseResultError):
    """Envelope reported a non-success application code."""

    def __init__(self, code: int, message: str, *, response: "Response | None" = None) -> None:
        super().__init__(message or f"service error code={code}", response=response, cause="service")
        self.code = code
        self.service_message = message


class TransportError(ResponseResultError):
    """Envelope could not be read, or its payload could not be decoded."""


class NetworkError(TransportError):
    """Upstream request or stream failed before a response was mapped."""

    def __init__(self, message: str, *, http_status: int | None = None) -> None:
        super().__init__(message, http_status=http_status, cause="network")


class ClientClosedError(ResponseResultError):
    """Raised when a client is used after close."""


__all__ = [
    "ResponseResultError",
    "StatusCodeError",
    "ImageMappingError",
    "JsonMappingError",
    "StringMappingError",
    "ObjectMappingError",
    "KeyPathDecodeError",
    "ServiceError",
    "TransportError",
    "NetworkError",
    "ClientClosedError",
]
