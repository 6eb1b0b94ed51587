"""
ctlapi - client core for a legacy XML-over-HTTP control-plane API.
Resilient request execution plus paged table retrieval.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from ctlapi.core.config import ClientConfig
from ctlapi.core.connection import Connection
from ctlapi.core.executor import RequestExecutor, execute
from ctlapi.core.exceptions import APIError, PaginationException
from ctlapi.core.logger import get_logger, setup_logging
from ctlapi.tables import (
    fetch_json_table,
    fetch_dyn_table,
    normalize_identifiers,
    normalize_identifiers_in_place,
)

__all__ = [
    "ClientConfig",
    "Connection",
    "RequestExecutor",
    "execute",
    "APIError",
    "PaginationException",
    "get_logger",
    "setup_logging",
    "fetch_json_table",
    "fetch_dyn_table",
    "normalize_identifiers",
    "normalize_identifiers_in_place",
    "__version__",
]
