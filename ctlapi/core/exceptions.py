"""
Custom exception hierarchy for the API client.
Provides granular error handling and meaningful error messages.
"""

from typing import Optional, Dict, Any
import traceback


class CtlApiException(Exception):
    """Base exception for all client-related errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.traceback = traceback.format_exc() if cause else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/reporting."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base


class RequestException(CtlApiException):
    """Exception raised during HTTP request operations."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details.update(
            {"url": url, "method": method, "status_code": status_code}
        )
        super().__init__(message, details=details, **kwargs)
        self.url = url
        self.method = method
        self.status_code = status_code


class ConnectionException(RequestException):
    """Exception for connection-related failures."""

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        dns_failure: bool = False,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details.update({"errno": errno})
        super().__init__(message, details=details, **kwargs)
        self.errno = errno
        self.dns_failure = dns_failure


class TimeoutException(RequestException):
    """Exception for request timeout scenarios."""

    pass


class TLSException(RequestException):
    """Exception for TLS handshake failures."""

    pass


class TransportProtocolException(RequestException):
    """Exception for invocation-level faults in the HTTP layer (truncated bodies, bad arguments)."""

    pass


class ResponseParseException(CtlApiException):
    """Exception raised when a response body cannot be parsed."""

    def __init__(
        self,
        message: str,
        body: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if body is not None:
            details.update({"body": body[:200]})
        super().__init__(message, details=details, **kwargs)
        self.body = body


class APIError(CtlApiException):
    """
    Raised when an API action completes without success.
    Carries the failed executor for diagnostic introspection.
    """

    def __init__(self, request: Any, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.request = request

    @property
    def error(self) -> Optional[str]:
        return getattr(self.request, "error", None)

    @property
    def trace(self) -> Optional[str]:
        return getattr(self.request, "trace", None)


class PaginationException(CtlApiException):
    """Exception when a paged endpoint reports inconsistent totals."""

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        total: Optional[int] = None,
        received: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details.update({"address": address, "total": total, "received": received})
        super().__init__(message, details=details, **kwargs)
        self.address = address
        self.total = total
        self.received = received


class ConfigurationException(CtlApiException):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details.update({"config_key": config_key, "config_value": config_value})
        super().__init__(message, details=details, **kwargs)


class ValidationException(CtlApiException):
    """Exception for input validation failures."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details.update({"field": field, "value": value})
        super().__init__(message, details=details, **kwargs)
