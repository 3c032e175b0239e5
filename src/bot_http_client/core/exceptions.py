"""
Иерархия исключений HTTP клиента.

Классификация:
- TemporaryError (retryable=True) - можно ретраить
- FatalError (fatal=True) - НЕ ретраить никогда
"""

from typing import TYPE_CHECKING, Optional

import httpx
import requests

if TYPE_CHECKING:
    from .response import HttpResponse

POST_SIZE_LIMIT_MESSAGE = "Limit Exceeded: URLFetch POST Size."

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение HTTP клиента."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ВРЕМЕННЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TemporaryError(HTTPClientException):
    """
    Временная ошибка - можно ретраить.

    Примеры: таймауты, сетевые ошибки, 429.
    """
    retryable = True

class TransportError(TemporaryError):
    """
    Транспорт не смог выполнить запрос (ответа нет вообще).

    Args:
        message: Сообщение об ошибке
        url: URL запроса
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)

class TimeoutError(TransportError):
    """Таймаут запроса."""

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[float] = None):
        self.timeout = timeout
        msg = message
        if timeout:
            msg += f" (timeout: {timeout}s)"
        super().__init__(msg, url)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Address unavailable
    - Network unreachable
    """
    pass

class TooManyRequestsError(TemporaryError):
    """
    429 Rate Limit.

    Не ретраится внутренним циклом HTTPClient: ошибка несёт ответ,
    чтобы вызывающий код мог прочитать подсказку retry_after.

    Args:
        response: Ответ, вызвавший ошибку
        message: Сообщение
    """

    def __init__(self, response: Optional["HttpResponse"] = None, message: str = "Too Many Requests."):
        self.response = response
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return self.response.status_code if self.response is not None else 429

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(HTTPClientException):
    """
    Фатальная ошибка - НЕ ретраить.

    Примеры: превышен лимит POST, исчерпан бюджет ретраев.
    """
    fatal = True

class PostSizeExceedLimitError(FatalError):
    """Тело запроса больше лимита транспорта. Повтор не поможет."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or POST_SIZE_LIMIT_MESSAGE)

class HTTPError(FatalError):
    """
    HTTP ошибка от транспорта без mute_http_exceptions.

    Args:
        status_code: HTTP статус
        url: URL
        message: Сообщение
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

class TooManyRetriesError(FatalError):
    """
    Исчерпан бюджет повторных попыток.

    Args:
        last_message: Последнее сообщение об ошибке
        url: URL
    """

    def __init__(self, last_message: Optional[str] = None, url: Optional[str] = None):
        self.last_message = last_message
        self.url = url
        super().__init__(f"fetch error after retry: {last_message}")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(exc: Exception, url: str) -> HTTPClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Examples:
        >>> exc = requests.exceptions.Timeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.retryable == True
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError(f"Request timeout: {exc}", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, requests.exceptions.RequestException):
        return TransportError(f"Request failed: {exc}", url)

    else:
        return HTTPClientException(str(exc))

def classify_httpx_exception(exc: Exception, url: str) -> HTTPClientException:
    """
    Конвертировать httpx исключения в наши исключения.

    Examples:
        >>> exc = httpx.ConnectTimeout("timed out")
        >>> our_exc = classify_httpx_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError(f"Request timeout: {exc}", url)

    elif isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, httpx.HTTPError):
        return TransportError(f"Request failed: {exc}", url)

    else:
        return HTTPClientException(str(exc))
