"""Public package exports for response-results."""

from .async_client import AsyncResultClient
from .client import ResultClient
from .config import ClientConfig, ResultMappingConfig, TransportConfig
from .core.mapper import ResponseResultMapper
from .core.notifications import UNAUTHORIZED_CODE, UnauthorizedBroadcast
from .core.response import ProgressResponse, Response
from .core.results import MappedResult, ServiceFailure, Success, TransportFailure

__all__ = [
    "ResultClient",
    "AsyncResultClient",
    "ClientConfig",
    "ResultMappingConfig",
    "TransportConfig",
    "ResponseResultMapper",
    "UNAUTHORIZED_CODE",
    "UnauthorizedBroadcast",
    "Response",
    "ProgressResponse",
    "MappedResult",
    "Success",
    "ServiceFailure",
    "TransportFailure",
]
