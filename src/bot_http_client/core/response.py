"""
Нормализованный HTTP ответ, не зависящий от транспорта.
"""

from typing import Any, List, Mapping, Optional

from requests.structures import CaseInsensitiveDict

from .utils import parse_json


class HttpResponse:
    """
    Ответ транспорта в едином виде для requests и httpx.

    Объект не изменяется после создания; copy() возвращает независимую копию.

    Args:
        status_code: HTTP статус
        headers: Заголовки (поиск без учёта регистра)
        content: Тело ответа в байтах
        url: Итоговый URL
        encoding: Кодировка из Content-Type (если известна)
        set_cookies: Все значения Set-Cookie

    Examples:
        >>> res = HttpResponse(200, {"Content-Type": "application/json"}, b'{"ok": true}')
        >>> res.headers["content-type"]
        'application/json'
        >>> res.json()
        {'ok': True}
    """

    def __init__(
        self,
        status_code: int,
        headers: Optional[Mapping[str, str]] = None,
        content: bytes = b"",
        url: str = "",
        encoding: Optional[str] = None,
        set_cookies: Optional[List[str]] = None,
    ):
        self._status_code = int(status_code)
        self._headers = CaseInsensitiveDict(headers or {})
        self._content = bytes(content)
        self._url = url
        self._encoding = encoding

        if set_cookies is None and "Set-Cookie" in self._headers:
            set_cookies = [self._headers["Set-Cookie"]]
        self._set_cookies = list(set_cookies) if set_cookies is not None else None

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> CaseInsensitiveDict:
        return self._headers.copy()

    @property
    def content(self) -> bytes:
        return self._content

    @property
    def url(self) -> str:
        return self._url

    @property
    def encoding(self) -> Optional[str]:
        return self._encoding

    @property
    def text(self) -> str:
        return self.get_content_text()

    def get_content_text(self, charset: Optional[str] = None) -> str:
        """
        Декодировать тело ответа.

        Порядок выбора кодировки: charset -> кодировка ответа -> utf-8.
        Недекодируемые байты заменяются.
        """
        try:
            return self._content.decode(charset or self._encoding or "utf-8", errors="replace")
        except LookupError:
            # неизвестная кодировка в заголовке
            return self._content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Распарсить тело как JSON (None если это не JSON)."""
        return parse_json(self.get_content_text())

    def get_set_cookie_header(self) -> Optional[List[str]]:
        if self._set_cookies is None:
            return None
        return list(self._set_cookies)

    def get_content_length(self) -> Optional[int]:
        value = self._headers.get("Content-Length")
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def copy(self) -> "HttpResponse":
        return HttpResponse(
            status_code=self._status_code,
            headers=self._headers,
            content=self._content,
            url=self._url,
            encoding=self._encoding,
            set_cookies=self._set_cookies,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpResponse):
            return NotImplemented
        return (
            self._status_code == other._status_code
            and dict(self._headers.lower_items()) == dict(other._headers.lower_items())
            and self._content == other._content
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<HttpResponse [{self._status_code}]>"
