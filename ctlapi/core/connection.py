"""
Connection context for the console's AJAX data endpoints.
Table fetchers post forms and read XML/JSON through this object.
"""

from typing import Optional, Dict, Any, Union

from .config import ClientConfig, DEFAULT_CONFIG
from .exceptions import RequestException
from .logger import get_logger
from .response_wrapper import RawResponse
from .transport import Transport

logger = get_logger("connection")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"


class Connection:
    """
    Authenticated channel to one console host.

    The session id is established elsewhere (a login request run through
    RequestExecutor) and handed over with ``use_session``.
    """

    def __init__(
        self,
        host: str,
        port: Optional[int] = None,
        session_id: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.host = host
        self.port = port or self.config.connection.port
        self.session_id = session_id
        self._owns_transport = transport is None
        self.transport = transport or Transport(self.config)

    @property
    def base_url(self) -> str:
        return f"https://{self.host}:{self.port}"

    def url_for(self, address: str) -> str:
        """Resolve a controller address relative to the console root."""
        if address.startswith(("http://", "https://")):
            return address
        return self.base_url + "/" + address.lstrip("/")

    def use_session(self, source: Any) -> "Connection":
        """Adopt a session id, given directly or from an executor that logged in."""
        self.session_id = getattr(source, "session_id", source)
        return self

    def _headers(self, content_type: Optional[str] = None) -> Dict[str, str]:
        headers = {}
        if content_type:
            headers["Content-Type"] = content_type
        if self.session_id:
            name = self.config.connection.session_header
            headers[name] = self.session_id
            headers["Cookie"] = f"{name}={self.session_id}"
        return headers

    def _check(self, response: RawResponse, method: str) -> str:
        if not response.is_success:
            raise RequestException(
                f"Console returned HTTP {response.status_code}",
                url=response.url,
                method=method,
                status_code=response.status_code,
            )
        return response.text

    def form_post(self, address: str, parameters: Dict[str, Any]) -> str:
        """POST form-encoded parameters and return the response text."""
        url = self.url_for(address)
        logger.debug(f"Form POST {url} {parameters}")
        response = self.transport.post(
            url, data=parameters, headers=self._headers(FORM_CONTENT_TYPE)
        )
        return self._check(response, "POST")

    def post(
        self,
        address: str,
        payload: Union[str, bytes],
        content_type: str = "text/xml",
    ) -> str:
        """POST a raw payload and return the response text."""
        url = self.url_for(address)
        response = self.transport.post(
            url, data=payload, headers=self._headers(content_type)
        )
        return self._check(response, "POST")

    def get(self, address: str) -> str:
        """GET an address and return the response text."""
        url = self.url_for(address)
        response = self.transport.get(url, headers=self._headers())
        return self._check(response, "GET")

    def close(self):
        if self._owns_transport:
            self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
