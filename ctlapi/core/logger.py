"""
Centralized logging configuration for the API client.
Console output is colored or JSON; an optional rotating file handler
always writes JSON lines.
"""

import copy
import json
import logging
import sys
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Union

ROOT_LOGGER_NAME = "ctlapi"


class StructuredFormatter(logging.Formatter):
    """Formatter that emits one JSON object per record."""

    def __init__(self, include_extras: bool = True):
        super().__init__()
        self.include_extras = include_extras

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if self.include_extras and hasattr(record, "context"):
            log_data["context"] = record.context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter with ANSI colored level names."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors and record.levelname in self.COLORS:
            # other handlers share the record
            record = copy.copy(record)
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )
        return super().format(record)


class ClientLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that attaches thread-local context to every record."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict] = None):
        super().__init__(logger, extra or {})
        self._context = threading.local()

    def process(self, msg: str, kwargs: Dict) -> tuple:
        context = dict(self.extra)
        context.update(getattr(self._context, "data", {}))

        extra = kwargs.get("extra", {})
        if context:
            extra["context"] = context
        kwargs["extra"] = extra
        return msg, kwargs

    @property
    def context(self) -> Dict:
        return dict(getattr(self._context, "data", {}))

    def set_context(self, **kwargs):
        """Set thread-local context for logging."""
        if not hasattr(self._context, "data"):
            self._context.data = {}
        self._context.data.update(kwargs)

    def clear_context(self):
        """Clear thread-local context."""
        if hasattr(self._context, "data"):
            self._context.data.clear()


_loggers: Dict[str, ClientLoggerAdapter] = {}
_initialized = False
_lock = threading.Lock()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    json_format: bool = False,
    use_colors: bool = True,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the ``ctlapi`` logger hierarchy.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a rotating JSON log file
        json_format: If True, use JSON formatting for console output
        use_colors: If True, use colored console output
        max_file_size: Maximum log file size before rotation
        backup_count: Number of rotated files to keep
        force: Reconfigure even if logging was already set up

    Returns:
        The root ``ctlapi`` logger
    """
    global _initialized

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    with _lock:
        if _initialized and not force:
            return root_logger

        root_logger.setLevel(getattr(logging, level.upper()))

        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stderr)
        if json_format:
            console_handler.setFormatter(StructuredFormatter())
        else:
            console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
        root_logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=max_file_size,
                backupCount=backup_count,
            )
            file_handler.setFormatter(StructuredFormatter())
            root_logger.addHandler(file_handler)

        _initialized = True

    return root_logger


def get_logger(name: str) -> ClientLoggerAdapter:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (will be prefixed with 'ctlapi.')

    Returns:
        Logger adapter carrying thread-local context
    """
    prefix = f"{ROOT_LOGGER_NAME}."
    full_name = name if name.startswith(prefix) else prefix + name

    with _lock:
        if full_name not in _loggers:
            _loggers[full_name] = ClientLoggerAdapter(logging.getLogger(full_name))
        return _loggers[full_name]


class LogContext:
    """Context manager for adding temporary logging context."""

    def __init__(self, logger: ClientLoggerAdapter, **context):
        self.logger = logger
        self.context = context
        self._previous_context: Dict = {}

    def __enter__(self):
        self._previous_context = self.logger.context
        self.logger.set_context(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.clear_context()
        if self._previous_context:
            self.logger.set_context(**self._previous_context)
        return False
