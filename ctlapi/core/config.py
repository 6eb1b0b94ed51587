"""
Client configuration management.
Supports file-based and programmatic configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
import json
import yaml

from .exceptions import ConfigurationException
from .logger import get_logger

logger = get_logger("config")


@dataclass
class RequestConfig:
    """HTTP request configuration settings."""
    timeout: float = 30.0
    # Host confirmation happens in the calling layer before any request is built.
    verify_ssl: bool = False
    content_type: str = "text/xml"
    user_agent: str = "ctlapi/1.0"
    default_headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class RetryConfig:
    """Retry budget for transient transport failures."""
    transient_retries: int = 5
    max_retries: int = 10
    pause: float = 0.0  # seconds slept before each retry


@dataclass
class TableConfig:
    """Paged table retrieval settings."""
    page_size: int = 500
    max_pages: Optional[int] = None


@dataclass
class ConnectionConfig:
    """Settings for the table/AJAX connection context."""
    port: int = 3780
    session_header: str = "nexposeCCSessionID"


@dataclass
class ClientConfig:
    """
    Main client configuration container.
    Aggregates all configuration settings.
    """
    request: RequestConfig = field(default_factory=RequestConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    table: TableConfig = field(default_factory=TableConfig)
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)

    def __post_init__(self):
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if self.request.timeout <= 0:
            raise ConfigurationException(
                "Timeout must be positive",
                config_key="request.timeout",
                config_value=self.request.timeout,
            )

        if self.retry.transient_retries < 0:
            raise ConfigurationException(
                "Transient retries must be non-negative",
                config_key="retry.transient_retries",
                config_value=self.retry.transient_retries,
            )

        if self.retry.transient_retries > self.retry.max_retries:
            raise ConfigurationException(
                f"Transient retries cannot exceed max retries ({self.retry.max_retries})",
                config_key="retry.transient_retries",
                config_value=self.retry.transient_retries,
            )

        if self.retry.pause < 0:
            raise ConfigurationException(
                "Retry pause must be non-negative",
                config_key="retry.pause",
                config_value=self.retry.pause,
            )

        if self.table.page_size < 1:
            raise ConfigurationException(
                "Page size must be at least 1",
                config_key="table.page_size",
                config_value=self.table.page_size,
            )

        if self.table.max_pages is not None and self.table.max_pages < 1:
            raise ConfigurationException(
                "Max pages must be at least 1",
                config_key="table.max_pages",
                config_value=self.table.max_pages,
            )

    @classmethod
    def from_file(cls, config_path: Path) -> "ClientConfig":
        """
        Load configuration from a file (JSON or YAML).

        Args:
            config_path: Path to configuration file

        Returns:
            Populated ClientConfig instance
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationException(
                f"Configuration file not found: {config_path}",
                config_key="config_path",
                config_value=str(config_path),
            )

        with open(config_path, "r") as f:
            if config_path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Populated ClientConfig instance
        """
        data = dict(data)
        request_data = data.pop("request", {}) or {}
        retry_data = data.pop("retry", {}) or {}
        table_data = data.pop("table", {}) or {}
        connection_data = data.pop("connection", {}) or {}

        try:
            return cls(
                **data,
                request=RequestConfig(**request_data),
                retry=RetryConfig(**retry_data),
                table=TableConfig(**table_data),
                connection=ConnectionConfig(**connection_data),
            )
        except TypeError as e:
            raise ConfigurationException(
                f"Unknown configuration key: {e}",
                cause=e,
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "request": {
                "timeout": self.request.timeout,
                "verify_ssl": self.request.verify_ssl,
                "content_type": self.request.content_type,
                "user_agent": self.request.user_agent,
                "default_headers": dict(self.request.default_headers),
            },
            "retry": {
                "transient_retries": self.retry.transient_retries,
                "max_retries": self.retry.max_retries,
                "pause": self.retry.pause,
            },
            "table": {
                "page_size": self.table.page_size,
                "max_pages": self.table.max_pages,
            },
            "connection": {
                "port": self.connection.port,
                "session_header": self.connection.session_header,
            },
        }


# Default configuration instance
DEFAULT_CONFIG = ClientConfig()
