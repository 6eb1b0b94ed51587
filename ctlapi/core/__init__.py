"""Core client components."""

from .config import ClientConfig
from .connection import Connection
from .executor import RequestExecutor, ExecutionResult, execute
from .request_wrapper import ApiRequest
from .response_wrapper import RawResponse
from .transport import Transport
from .exceptions import (
    CtlApiException,
    RequestException,
    APIError,
    PaginationException,
    ConfigurationException,
    ValidationException,
)
from .logger import get_logger, setup_logging

__all__ = [
    "ClientConfig",
    "Connection",
    "RequestExecutor",
    "ExecutionResult",
    "execute",
    "ApiRequest",
    "RawResponse",
    "Transport",
    "CtlApiException",
    "RequestException",
    "APIError",
    "PaginationException",
    "ConfigurationException",
    "ValidationException",
    "get_logger",
    "setup_logging",
]
