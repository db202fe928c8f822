"""Three-way mapping outcome: success, service failure, transport failure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, NoReturn, TypeAlias, TypeVar

from .errors import NetworkError, ServiceError, TransportError

T = TypeVar("T")

FailureCause = Literal["parse", "decode", "network"]


@dataclass(slots=True, frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True, frozen=True)
class ServiceFailure:
    """Envelope parsed, but its code is not the success code."""

    code: int
    message: str = ""

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise ServiceError(self.code, self.message)


@dataclass(slots=True, frozen=True)
class TransportFailure:
    """Envelope unreadable, payload undecodable, or upstream failed."""

    message: str
    cause: FailureCause = "parse"
    error: BaseException | None = None

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        if self.cause == "network":
            raise NetworkError(self.message) from self.error
        raise TransportError(self.message, cause=self.cause) from self.error


MappedResult: TypeAlias = Success[T] | ServiceFailure | TransportFailure


__all__ = [
    "FailureCause",
    "Success",
    "ServiceFailure",
    "TransportFailure",
    "MappedResult",
]
