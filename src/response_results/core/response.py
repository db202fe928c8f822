"""Response value objects and their synchronous filter/map operations."""

from __future__ import annotations

import io
import json
from collections.abc import Container, Mapping
from dataclasses import dataclass, field
from typing import TypeVar

import httpx
from PIL import Image, UnidentifiedImageError

from .errors import (
    ImageMappingError,
    JsonMappingError,
    KeyPathDecodeError,
    ObjectMappingError,
    StatusCodeError,
    StringMappingError,
)
from .key_path import JsonKeyPathDecoder, KeyPathDecoder, value_at_key_path

T = TypeVar("T")

NO_MESSAGE_PLACEHOLDER = "no error message"
SUCCESSFUL_STATUS_CODES = range(200, 300)
SUCCESSFUL_AND_REDIRECT_STATUS_CODES = range(200, 400)

_DEFAULT_DECODER = JsonKeyPathDecoder()


@dataclass(slots=True, frozen=True)
class Response:
    """Raw body and status of one HTTP exchange."""

    status_code: int
    data: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    request: httpx.Request | None = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "Response":
        try:
            request: httpx.Request | None = response.request
        except RuntimeError:
            request = None
        return cls(
            status_code=response.status_code,
            data=response.content,
            headers=dict(response.headers),
            request=request,
        )

    def text_or_placeholder(self) -> str:
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError:
            return NO_MESSAGE_PLACEHOLDER

    def filter(self, status_codes: Container[int]) -> "Response":
        if self.status_code not in status_codes:
            raise StatusCodeError(
                f"status code {self.status_code} is not accepted",
                response=self,
            )
        return self

    def filter_status_code(self, status_code: int) -> "Response":
        return self.filter((status_code,))

    def filter_successful_status_codes(self) -> "Response":
        return self.filter(SUCCESSFUL_STATUS_CODES)

    def filter_successful_status_and_redirect_codes(self) -> "Response":
        return self.filter(SUCCESSFUL_AND_REDIRECT_STATUS_CODES)

    def map_image(self) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(self.data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise ImageMappingError("response body is not an image", response=self) from exc
        return image

    def map_json(self, *, fails_on_empty_data: bool = True) -> object:
        if not self.data and not fails_on_empty_data:
            return None
        try:
            return json.loads(self.data)
        except (ValueError, UnicodeDecodeError, RecursionError) as exc:
            raise JsonMappingError("response body is not valid JSON", response=self) from exc

    def map_string(self, *, at_key_path: str | None = None) -> str:
        if at_key_path:
            document = self.map_json()
            try:
                value = value_at_key_path(document, at_key_path)
            except KeyPathDecodeError as exc:
                raise StringMappingError(str(exc), response=self) from exc
            if not isinstance(value, str):
                raise StringMappingError(
                    f"value at '{at_key_path}' is not a string",
                    response=self,
                )
            return value
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StringMappingError("response body is not UTF-8 text", response=self) from exc

    def map(
        self,
        type_: type[T],
        *,
        at_key_path: str | None = None,
        decoder: KeyPathDecoder | None = None,
        fails_on_empty_data: bool = True,
    ) -> T:
        active = decoder or _DEFAULT_DECODER
        try:
            return active.decode(
                self.data,
                type_,
                at_key_path,
                fails_on_empty_data=fails_on_empty_data,
            )
        except ObjectMappingError as exc:
            raise ObjectMappingError(exc.message, response=self) from exc


@dataclass(slots=True, frozen=True)
class ProgressResponse:
    """One step of a transfer; the final step carries the response."""

    progress: float = 0.0
    response: Response | None = None

    @property
    def completed(self) -> bool:
        return self.progress >= 1.0 and self.response is not None


__all__ = [
    "NO_MESSAGE_PLACEHOLDER",
    "SUCCESSFUL_STATUS_CODES",
    "SUCCESSFUL_AND_REDIRECT_STATUS_CODES",
    "Response",
    "ProgressResponse",
]
