"""
Immutable representation of one API request.
The URL template's API_VERSION placeholder is resolved at construction.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Union
from urllib.parse import urlparse, urlunparse

from .config import ClientConfig, DEFAULT_CONFIG
from .exceptions import ValidationException

API_VERSION_PLACEHOLDER = "API_VERSION"

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class ApiRequest:
    """
    Immutable wrapper for an XML API request.
    """
    url: str
    body: Union[str, bytes] = ""
    api_version: str = "1.1"
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "text/xml"})
    timeout: float = 30.0
    verify_ssl: bool = False

    def __post_init__(self):
        parsed = urlparse(self.url)
        if not parsed.scheme or not parsed.netloc:
            raise ValidationException(
                f"Invalid URL format: {self.url}",
                field="url",
                value=self.url,
            )
        if parsed.scheme not in DEFAULT_PORTS:
            raise ValidationException(
                f"Unsupported URL scheme: {parsed.scheme}",
                field="url",
                value=self.url,
            )

    @classmethod
    def from_template(
        cls,
        url_template: str,
        body: Union[str, bytes],
        api_version: str = "1.1",
        config: Optional[ClientConfig] = None,
    ) -> "ApiRequest":
        """Build a request, substituting the version placeholder in the URL template."""
        config = config or DEFAULT_CONFIG
        headers = dict(config.request.default_headers)
        headers["Content-Type"] = config.request.content_type
        return cls(
            url=url_template.replace(API_VERSION_PLACEHOLDER, api_version, 1),
            body=body,
            api_version=api_version,
            headers=headers,
            timeout=config.request.timeout,
            verify_ssl=config.request.verify_ssl,
        )

    @property
    def parsed_url(self):
        return urlparse(self.url)

    @property
    def scheme(self) -> str:
        return self.parsed_url.scheme

    @property
    def host(self) -> str:
        return self.parsed_url.hostname or ""

    @property
    def port(self) -> int:
        return self.parsed_url.port or DEFAULT_PORTS[self.scheme]

    @property
    def path(self) -> str:
        return self.parsed_url.path or "/"

    @property
    def endpoint(self) -> str:
        """URL the body is posted to (query and fragment dropped)."""
        parsed = self.parsed_url
        return urlunparse((parsed.scheme, parsed.netloc, self.path, "", "", ""))
