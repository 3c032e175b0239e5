"""Bot HTTP Client - resilient HTTP client layer for the Telegram Bot API."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.http_client import HTTPClient
from .core.config import BotClientConfig, RetryConfig
from .core.options import FetchOptions, HttpBlob, RetryRequest
from .core.response import HttpResponse
from .core.settings import BotClientSettings, load_from_env
from .core.logging import ClientLogger, LoggingConfig
from .core.exceptions import (
    HTTPClientException,
    TemporaryError,
    FatalError,
    TransportError,
    TimeoutError,
    ConnectionError,
    TooManyRequestsError,
    PostSizeExceedLimitError,
    HTTPError,
    TooManyRetriesError,
)
from .transports import HttpxTransport, RequestsTransport, Transport, create_transport
from .telegram import (
    TelegramBot,
    TelegramBotClient,
    TelegramError,
    TelegramFileTooLargeError,
    TelegramRecipient,
    TelegramResponse,
    TelegramResponseResult,
    TelegramSendMediaByUrlError,
    parse_response,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
logging.getLogger('bot_http_client').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("bot-http-client")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "HTTPClient",
    "HttpResponse",
    "FetchOptions",
    "HttpBlob",
    "RetryRequest",

    # Config
    "BotClientConfig",
    "RetryConfig",
    "BotClientSettings",
    "load_from_env",
    "ClientLogger",
    "LoggingConfig",

    # Transports
    "Transport",
    "HttpxTransport",
    "RequestsTransport",
    "create_transport",

    # Telegram
    "TelegramBot",
    "TelegramBotClient",
    "TelegramRecipient",
    "TelegramResponse",
    "TelegramResponseResult",
    "parse_response",

    # Exceptions
    "HTTPClientException",
    "TemporaryError",
    "FatalError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "TooManyRequestsError",
    "PostSizeExceedLimitError",
    "HTTPError",
    "TooManyRetriesError",
    "TelegramError",
    "TelegramFileTooLargeError",
    "TelegramSendMediaByUrlError",

    # Version
    "__version__",
]
