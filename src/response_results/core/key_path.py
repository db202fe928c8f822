"""Typed decoding of JSON values addressed by dotted key paths."""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import KeyPathDecodeError

T = TypeVar("T")


class KeyPathDecoder(Protocol):
    def decode(
        self,
        data: bytes,
        type_: type[T],
        key_path: str | None = None,
        *,
        fails_on_empty_data: bool = True,
    ) -> T:
        """Decode the value at key_path, raising KeyPathDecodeError on failure."""


def value_at_key_path(document: object, key_path: str | None) -> object:
    """Walk a dotted key path through nested JSON objects."""

    if not key_path:
        return document
    current = document
    walked: list[str] = []
    for segment in key_path.split("."):
        walked.append(segment)
        if not isinstance(current, Mapping):
            raise KeyPathDecodeError(
                f"'{'.'.join(walked[:-1]) or '$'}' is not an object",
                key_path=key_path,
            )
        if segment not in current:
            raise KeyPathDecodeError(
                f"key path '{'.'.join(walked)}' not found",
                key_path=key_path,
            )
        current = current[segment]
    return current


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def _type_name(type_: object) -> str:
    return getattr(type_, "__name__", None) or repr(type_)


class JsonKeyPathDecoder:
    """Decode JSON bodies with pydantic, strict by default."""

    def __init__(self, *, strict: bool = True) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def decode(
        self,
        data: bytes,
        type_: type[T],
        key_path: str | None = None,
        *,
        fails_on_empty_data: bool = True,
    ) -> T:
        if not data and not fails_on_empty_data:
            document: object = {}
        else:
            try:
                document = json.loads(data)
            except (ValueError, UnicodeDecodeError, RecursionError) as exc:
                raise KeyPathDecodeError(
                    "response body is not valid JSON",
                    key_path=key_path,
                ) from exc

        value = value_at_key_path(document, key_path)
        try:
            return _adapter(type_).validate_json(json.dumps(value), strict=self._strict)
        except ValidationError as exc:
            detail = "; ".join(error["msg"] for error in exc.errors())
            location = f"'{key_path}'" if key_path else "document root"
            raise KeyPathDecodeError(
                f"value at {location} is not a valid {_type_name(type_)}: {detail}",
                key_path=key_path,
            ) from exc


__all__ = [
    "KeyPathDecoder",
    "JsonKeyPathDecoder",
    "value_at_key_path",
]
