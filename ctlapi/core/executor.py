"""
Request executor for the XML API.

One ``execute()`` call posts the request body, classifies the outcome as
success, protocol failure or transient transport failure, and retries the
transient class within a fixed budget. Failures are reported on the
executor, never raised; ``execute()`` at module level is the raising form.
"""

import errno
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Union

from .config import ClientConfig, DEFAULT_CONFIG
from .exceptions import (
    APIError,
    ConnectionException,
    ResponseParseException,
    TimeoutException,
    TLSException,
    TransportProtocolException,
)
from .logger import get_logger, LogContext
from .request_wrapper import ApiRequest
from .response_wrapper import RawResponse
from .schemas import parse_document, schema_for
from .transport import Transport

logger = get_logger("executor")

INVALID_XML = "service returned invalid XML"
HOST_TIMEOUT = "host did not respond"
HOST_UNREACHABLE = "host is unreachable"
SERVICE_UNAVAILABLE = "service is not available"
USER_INTERRUPT = "received a user interrupt"

UNREACHABLE_ERRNOS = frozenset(
    getattr(errno, name)
    for name in (
        "EHOSTUNREACH", "ENETDOWN", "ENETUNREACH", "ENETRESET",
        "EHOSTDOWN", "EACCES", "EINVAL", "EADDRNOTAVAIL",
    )
    if hasattr(errno, name)
)


class Outcome(Enum):
    """Classification of a single attempt."""
    SUCCESS = "success"
    RETRY = "retry"
    FATAL = "fatal"


@dataclass
class AttemptOutcome:
    """
    Result of one request/response cycle.

    For ``RETRY`` outcomes ``error`` is the message reported if the retry
    budget runs out (None leaves the result to the unrecognized-response
    fallback).
    """
    status: Outcome
    success: bool = False
    session_id: Optional[str] = None
    error: Optional[str] = None
    trace: Optional[str] = None
    raw_response: Optional[RawResponse] = None
    document: Optional[ET.Element] = None
    cause: Optional[BaseException] = None


@dataclass
class ExecutionResult:
    """Accumulated outcome of one ``execute()`` call."""
    session_id: Optional[str] = None
    success: bool = False
    error: Optional[str] = None
    trace: Optional[str] = None
    raw_response: Optional[RawResponse] = None
    document: Optional[ET.Element] = None
    attempts: int = 0
    retries: int = 0

    @property
    def raw_body(self) -> Optional[str]:
        return self.raw_response.text if self.raw_response is not None else None

    def apply(self, outcome: AttemptOutcome):
        self.success = outcome.success
        self.session_id = outcome.session_id
        self.error = outcome.error
        self.trace = outcome.trace
        if outcome.raw_response is not None:
            self.raw_response = outcome.raw_response
        self.document = outcome.document


def classify_connection_failure(exc: ConnectionException) -> str:
    """Map a connection failure to its fixed user-facing message."""
    if exc.dns_failure or exc.errno in UNREACHABLE_ERRNOS:
        return HOST_UNREACHABLE
    return SERVICE_UNAVAILABLE


class RequestExecutor:
    """
    Executes one XML API request against a versioned endpoint.

    Args:
        body: Serialized XML request
        url: URL template; ``API_VERSION`` is replaced by ``api_version``
        api_version: API version tag, selects the response schema
        config: Client configuration (timeouts, retry budget)
        transport: Optional transport to use instead of a private one
    """

    def __init__(
        self,
        body: Union[str, bytes],
        url: str,
        api_version: str = "1.1",
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.request = ApiRequest.from_template(url, body, api_version, self.config)
        self.schema = schema_for(api_version)
        self._owns_transport = transport is None
        self.transport = transport or Transport(self.config)
        self.result = ExecutionResult()

    @property
    def api_version(self) -> str:
        return self.request.api_version

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def success(self) -> bool:
        return self.result.success

    @property
    def error(self) -> Optional[str]:
        return self.result.error

    @property
    def trace(self) -> Optional[str]:
        return self.result.trace

    @property
    def session_id(self) -> Optional[str]:
        return self.result.session_id

    @property
    def raw_response(self) -> Optional[RawResponse]:
        return self.result.raw_response

    @property
    def raw_body(self) -> Optional[str]:
        return self.result.raw_body

    def attributes(self) -> Optional[Dict[str, str]]:
        """Root element attributes of the last response, None without a document."""
        if self.result.document is None:
            return None
        return dict(self.result.document.attrib)

    def execute(self) -> Optional[str]:
        """
        Run the request, retrying transient failures.

        Returns:
            The session id reported by the server, if any
        """
        self.result = ExecutionResult()
        limit = self.config.retry.transient_retries
        pause = self.config.retry.pause

        with LogContext(logger, url=self.request.endpoint, api_version=self.api_version):
            while True:
                outcome = self._attempt()
                self.result.attempts += 1

                if outcome.status is not Outcome.RETRY:
                    self.result.apply(outcome)
                    break

                if self.result.retries >= limit:
                    logger.warning(
                        f"Giving up after {self.result.retries} retries: {outcome.cause}"
                    )
                    self.result.apply(outcome)
                    break

                self.result.retries += 1
                logger.debug(
                    f"Transient failure, retry {self.result.retries}/{limit}: {outcome.cause}"
                )
                if pause:
                    time.sleep(pause)

            if not (self.result.success or self.result.error):
                self.result.error = (
                    f"service returned an unrecognized response: {self.result.raw_body!r}"
                )

            if not self.result.success:
                logger.debug(f"Request failed: {self.result.error}")

        return self.result.session_id

    def _attempt(self) -> AttemptOutcome:
        """One full request/response cycle, starting from a fresh transport."""
        raw = None
        try:
            self.transport.prepare()
            raw = self.transport.post(
                self.request.endpoint,
                data=self.request.body,
                headers=self.request.headers,
                timeout=self.request.timeout,
                verify=self.request.verify_ssl,
            )
            root = parse_document(raw.body)
        except (TLSException, TransportProtocolException) as e:
            return AttemptOutcome(Outcome.RETRY, cause=e)
        except TimeoutException as e:
            return AttemptOutcome(Outcome.RETRY, error=HOST_TIMEOUT, cause=e)
        except ConnectionException as e:
            return AttemptOutcome(
                Outcome.FATAL, error=classify_connection_failure(e), cause=e
            )
        except KeyboardInterrupt as e:
            return AttemptOutcome(
                Outcome.FATAL, error=USER_INTERRUPT, raw_response=raw, cause=e
            )
        except ResponseParseException as e:
            return AttemptOutcome(
                Outcome.FATAL,
                error=f"error parsing response: {e.message}",
                raw_response=raw,
                cause=e,
            )

        if root is None:
            return AttemptOutcome(Outcome.FATAL, error=INVALID_XML, raw_response=raw)

        session_id = self.schema.extract_session_id(root)
        if self.schema.is_success(root):
            return AttemptOutcome(
                Outcome.SUCCESS,
                success=True,
                session_id=session_id,
                raw_response=raw,
                document=root,
            )

        error, trace = self.schema.extract_error(root)
        return AttemptOutcome(
            Outcome.FATAL,
            session_id=session_id,
            error=error or None,
            trace=trace,
            raw_response=raw,
            document=root,
        )

    def close(self):
        if self._owns_transport:
            self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def execute(
    url: str,
    body: Union[str, bytes],
    api_version: str = "1.1",
    **kwargs
) -> RequestExecutor:
    """
    Execute a request and raise on failure.

    Raises:
        APIError: the action did not succeed; ``error.request`` is the executor
    """
    executor = RequestExecutor(body, url, api_version, **kwargs)
    try:
        executor.execute()
    finally:
        executor.close()

    if not executor.success:
        raise APIError(executor, f"Action failed: {executor.error}")
    return executor
