"""Core модули: конфиг, исключения, ответ, HTTP клиент с ретраями."""

from .config import RetryConfig, BotClientConfig
from .exceptions import (
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
    classify_requests_exception,
    classify_httpx_exception,
)
from .options import FetchOptions, HttpBlob, RetryRequest, append_querystring, querystring
from .response import HttpResponse
from .http_client import HTTPClient

__all__ = [
    # Config
    "RetryConfig",
    "BotClientConfig",
    # Core
    "HTTPClient",
    "HttpResponse",
    "FetchOptions",
    "HttpBlob",
    "RetryRequest",
    "append_querystring",
    "querystring",
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
    "classify_requests_exception",
    "classify_httpx_exception",
]
