"""
HTTP transport for the API client.
Wraps a requests session and translates transport failures into the
client's exception hierarchy so callers can classify them.
"""

import socket
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any, Iterator, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import InsecureRequestWarning

from .config import ClientConfig, DEFAULT_CONFIG
from .response_wrapper import RawResponse
from .exceptions import (
    ConnectionException,
    TimeoutException,
    TLSException,
    TransportProtocolException,
)
from .logger import get_logger

# Certificate verification is disabled on purpose at this layer
requests.packages.urllib3.disable_warnings(InsecureRequestWarning)

logger = get_logger("transport")


@dataclass
class TransportStats:
    """Counters for requests issued through one transport."""
    total_requests: int = 0
    failed_requests: int = 0
    timeouts: int = 0
    total_bytes_received: int = 0
    total_time: float = 0.0

    def record(self, success: bool, bytes_received: int, elapsed: float):
        self.total_requests += 1
        if not success:
            self.failed_requests += 1
        self.total_bytes_received += bytes_received
        self.total_time += elapsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "failed_requests": self.failed_requests,
            "timeouts": self.timeouts,
            "total_bytes_received": self.total_bytes_received,
            "total_time": f"{self.total_time:.3f}s",
        }


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield an exception and everything it wraps (args, urllib3 reason, cause, context)."""
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))
        yield current

        stack.extend(current.args)
        stack.append(getattr(current, "reason", None))
        stack.append(current.__cause__)
        stack.append(current.__context__)


def find_errno(exc: BaseException) -> Optional[int]:
    """Return the first OS-level errno found in the exception chain."""
    for cause in iter_causes(exc):
        if isinstance(cause, OSError) and cause.errno is not None:
            return cause.errno
    return None


def is_dns_failure(exc: BaseException) -> bool:
    return any(isinstance(cause, socket.gaierror) for cause in iter_causes(exc))


class Transport:
    """
    Blocking HTTPS POST/GET primitive.

    Retries are not done here: urllib3's own retry is disabled so the
    executor sees every failure and applies its own budget.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._session: Optional[requests.Session] = None
        self._stats = TransportStats()
        self.prepare()

    def prepare(self) -> "Transport":
        """(Re)create the underlying session. Safe to call repeatedly."""
        if self._session is not None:
            self._session.close()

        self._session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

        self._session.headers.update({"User-Agent": self.config.request.user_agent})
        self._session.headers.update(self.config.request.default_headers)
        self._session.verify = self.config.request.verify_ssl
        return self

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self.prepare()
        return self._session

    def request(
        self,
        method: str,
        url: str,
        data: Optional[Union[str, bytes, Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
    ) -> RawResponse:
        """
        Execute a single HTTP request and read the full body.

        Raises:
            TLSException: TLS handshake failure
            TimeoutException: connect or read timeout
            ConnectionException: network/connection level failure (errno attached)
            TransportProtocolException: truncated body or invalid request arguments
        """
        req_timeout = timeout or self.config.request.timeout
        verify_ssl = self.config.request.verify_ssl if verify is None else verify
        start_time = time.time()

        try:
            logger.debug(f"Sending {method} request to {url}")
            response = self.session.request(
                method,
                url,
                data=data,
                headers=headers or {},
                timeout=req_timeout,
                verify=verify_ssl,
                allow_redirects=False,
            )
            body = response.content
        except requests.exceptions.SSLError as e:
            self._fail(start_time)
            raise TLSException(
                "TLS handshake failed", url=url, method=method, cause=e
            ) from e
        except requests.exceptions.Timeout as e:
            self._stats.timeouts += 1
            self._fail(start_time)
            raise TimeoutException(
                f"Request timed out after {req_timeout}s",
                url=url, method=method, cause=e,
            ) from e
        except requests.exceptions.ConnectionError as e:
            self._fail(start_time)
            raise ConnectionException(
                "Connection failed",
                errno=find_errno(e),
                dns_failure=is_dns_failure(e),
                url=url, method=method, cause=e,
            ) from e
        except requests.exceptions.RequestException as e:
            self._fail(start_time)
            raise TransportProtocolException(
                f"Request failed: {e}", url=url, method=method, cause=e
            ) from e

        elapsed = time.time() - start_time
        self._stats.record(True, len(body), elapsed)
        logger.debug(f"Response: {response.status_code} ({len(body)} bytes, {elapsed:.3f}s)")

        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
            url=response.url,
            elapsed_time=elapsed,
        )

    def _fail(self, start_time: float):
        self._stats.record(False, 0, time.time() - start_time)

    def post(
        self,
        url: str,
        data: Optional[Union[str, bytes, Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> RawResponse:
        """Convenience method for POST requests."""
        return self.request("POST", url, data=data, headers=headers, **kwargs)

    def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> RawResponse:
        """Convenience method for GET requests."""
        return self.request("GET", url, headers=headers, **kwargs)

    @property
    def stats(self) -> TransportStats:
        return self._stats

    def close(self):
        """Close the underlying session."""
        if self._session:
            self._session.close()
            self._session = None
        logger.debug(f"Transport closed. Stats: {self._stats.to_dict()}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
