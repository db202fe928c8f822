"""Client and result-mapping configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


def _validate_key_path(name: str, key_path: object) -> None:
    if not isinstance(key_path, str) or key_path == "":
        raise ValueError(f"mapping.{name} must not be empty")
    if any(segment == "" for segment in key_path.split(".")):
        raise ValueError(f"mapping.{name} must not contain empty segments")


@dataclass(slots=True, frozen=True)
class ResultMappingConfig:
    """Where to find code, message and payload inside a response envelope."""

    data_key: str = "data"
    code_key: str = "code"
    message_key: str = "message"
    success_code: int = 200

    def validate(self) -> None:
        _validate_key_path("data_key", self.data_key)
        _validate_key_path("code_key", self.code_key)
        _validate_key_path("message_key", self.message_key)
        if isinstance(self.success_code, bool) or not isinstance(self.success_code, int):
            raise ValueError("mapping.success_code must be int")


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Transport-related settings."""

    timeout_connect_seconds: float = 5.0
    timeout_read_seconds: float = 30.0
    timeout_write_seconds: float = 30.0
    timeout_pool_seconds: float = 5.0

    def validate(self) -> None:
        for field_name in (
            "timeout_connect_seconds",
            "timeout_read_seconds",
            "timeout_write_seconds",
            "timeout_pool_seconds",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"transport.{field_name} must be > 0")


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Runtime configuration for result clients."""

    base_url: str = ""
    user_agent: str = "response-results/0.1.0"
    download_chunk_size: int = 64 * 1024

    transport: TransportConfig = field(default_factory=TransportConfig)
    mapping: ResultMappingConfig = field(default_factory=ResultMappingConfig)

    def validate(self) -> None:
        if not isinstance(self.base_url, str):
            raise ValueError("base_url must be str")
        if self.download_chunk_size <= 0:
            raise ValueError("download_chunk_size must be > 0")
        self.transport.validate()
        self.mapping.validate()


__all__ = [
    "ResultMappingConfig",
    "TransportConfig",
    "ClientConfig",
]
