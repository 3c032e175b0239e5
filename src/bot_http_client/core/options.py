"""
Параметры запроса.

Все значения immutable (frozen dataclasses): для каждой повторной попытки
создаётся новый объект через replace().
"""

from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from .response import HttpResponse

# Колбэк решения о ретрае: получает ответ (None если транспорт упал),
# может быть обычной функцией или корутиной.
RetryHandler = Callable[[Optional[HttpResponse]], Union[None, Awaitable[None]]]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BLOB
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpBlob:
    """
    Бинарное вложение для multipart запроса.

    Args:
        content: Данные
        name: Имя файла
        content_type: MIME тип

    Examples:
        >>> HttpBlob(b"...", name="video.mp4", content_type="video/mp4")
    """
    content: bytes
    name: str = "file"
    content_type: str = "application/octet-stream"

    def as_file_tuple(self):
        """Вернуть как (filename, content, content_type) для requests/httpx."""
        return (self.name, self.content, self.content_type)


def is_binary(value: Any) -> bool:
    """Значение нужно отправлять как файл, а не как поле формы."""
    if isinstance(value, (bytes, bytearray, HttpBlob)):
        return True
    return hasattr(value, "read") and not isinstance(value, str)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# FETCH OPTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class FetchOptions:
    """
    Параметры одного HTTP запроса.

    Args:
        method: HTTP метод
        params: Query параметры (добавляются к URL)
        payload: Тело запроса (словарь полей, может содержать файлы) или строка/байты
        headers: Заголовки
        content_type: Content-Type
        follow_redirects: Следовать редиректам
        mute_http_exceptions: Возвращать ответ при любом статусе вместо исключения

    Examples:
        >>> FetchOptions(method="post", payload={"chat_id": 1, "text": "hi"})
        >>> FetchOptions(params={"offset": 10})
    """
    method: str = "get"
    params: Optional[Mapping[str, Any]] = None
    payload: Optional[Union[Mapping[str, Any], str, bytes]] = None
    headers: Optional[Mapping[str, str]] = None
    content_type: Optional[str] = None
    follow_redirects: bool = True
    mute_http_exceptions: bool = False

    def replace(self, **changes: Any) -> "FetchOptions":
        """Новый объект с изменёнными полями."""
        return replace(self, **changes)

    def for_retry(self) -> "FetchOptions":
        """Параметры для попытки внутри ретрай-цикла (статус не бросает исключение)."""
        if self.mute_http_exceptions:
            return self
        return self.replace(mute_http_exceptions=True)

    def describe(self) -> Dict[str, Any]:
        """Краткое описание для debug логов (файлы не выводятся)."""
        payload: Any = self.payload
        if isinstance(payload, Mapping):
            payload = {
                key: "<binary>" if is_binary(value) else value
                for key, value in payload.items()
            }
        elif isinstance(payload, bytes):
            payload = f"<{len(payload)} bytes>"
        return {
            "method": self.method.upper(),
            "params": dict(self.params) if self.params else None,
            "payload": payload,
            "content_type": self.content_type,
            "follow_redirects": self.follow_redirects,
            "mute_http_exceptions": self.mute_http_exceptions,
        }


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY REQUEST
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryRequest:
    """
    Запрос для HTTPClient.fetch_with_retry.

    Args:
        url: URL
        options: Параметры запроса
        retry: Оставшийся бюджет повторов (>= 0)
        handle_retry: Колбэк перед каждым повтором (по умолчанию - пауза retry_second)
    """
    url: str
    options: FetchOptions = field(default_factory=FetchOptions)
    retry: int = 0
    handle_retry: Optional[RetryHandler] = None

    def __post_init__(self):
        """Валидация."""
        if self.retry < 0:
            raise ValueError("retry must be non-negative")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# QUERY STRING
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def querystring(params: Mapping[str, Any]) -> str:
    """
    Собрать query string как есть, без экранирования.

    Examples:
        >>> querystring({"a": 1, "b": "x"})
        'a=1&b=x'
    """
    return "&".join(f"{key}={value}" for key, value in params.items())


def append_querystring(url: str, params: Mapping[str, Any]) -> str:
    """
    Добавить параметры к URL.

    Examples:
        >>> append_querystring("https://x/y", {"a": 1})
        'https://x/y?a=1'
        >>> append_querystring("https://x/y?z=1", {"a": 1})
        'https://x/y?z=1&a=1'
    """
    qs = querystring(params)
    if url.find("?") > 0:
        return f"{url}&{qs}"
    return f"{url}?{qs}"
