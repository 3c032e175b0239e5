"""
Logging system for the bot client.

Provides structured logging with multiple formats, handlers, and filters.

Example:
    >>> from bot_http_client.core.logging import ClientLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="INFO", format="colored")
    >>> logger = ClientLogger(config, debug=True)
    >>> client = HTTPClient(transport, logger=logger)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import ClientLogger
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "ClientLogger",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
