"""
Базовый класс транспорта.

Транспорт выполняет один HTTP запрос и возвращает HttpResponse.
Ретраи, классификация статусов и паузы живут в HTTPClient.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.exceptions import HTTPError, POST_SIZE_LIMIT_MESSAGE, TransportError
from ..core.options import FetchOptions, HttpBlob, append_querystring
from ..core.response import HttpResponse
from ..core.utils import encode_form_value, mask_token

FilePart = Tuple[str, Any, str]


class Transport(ABC):
    """
    Базовый класс для бэкендов (requests, httpx).

    Контракт fetch():
    - params добавляются к URL через append_querystring
    - headers/content_type передаются только если заданы
    - follow_redirects=False - редирект не выполняется
    - mute_http_exceptions=True - ответ возвращается при любом статусе
    - сетевой сбой -> TransportError (ответа нет)

    Args:
        timeout: Таймаут одной попытки (сек), None - без таймаута
        max_payload_size: Лимит тела запроса (байты), None - без лимита
    """

    name: str = "base"

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_payload_size: Optional[int] = None,
    ):
        self.timeout = timeout
        self.max_payload_size = max_payload_size

    @abstractmethod
    async def fetch(self, url: str, options: FetchOptions) -> HttpResponse:
        """Выполнить один запрос."""

    async def close(self) -> None:
        """Освободить ресурсы бэкенда."""

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ==================== Общие хелперы ====================

    @staticmethod
    def build_url(url: str, options: FetchOptions) -> str:
        if options.params:
            return append_querystring(url, options.params)
        return url

    @staticmethod
    def build_headers(options: FetchOptions) -> Optional[Dict[str, str]]:
        if not options.headers and not options.content_type:
            return None
        headers = dict(options.headers or {})
        if options.content_type:
            headers["Content-Type"] = options.content_type
        return headers

    @staticmethod
    def split_payload(
        payload: Mapping[str, Any],
    ) -> Tuple[Dict[str, str], Dict[str, FilePart]]:
        """
        Разделить payload на поля формы и файлы.

        None пропускается, bytes/HttpBlob/файловые объекты уходят в files.
        Файловые объекты читаются в bytes с начала потока, поэтому каждая
        попытка отправляет одно и то же содержимое.

        Examples:
            >>> Transport.split_payload({"chat_id": 1, "photo": b"...", "caption": None})
            ({'chat_id': '1'}, {'photo': ('file', b'...', 'application/octet-stream')})
        """
        fields: Dict[str, str] = {}
        files: Dict[str, FilePart] = {}
        for key, value in payload.items():
            if value is None:
                continue
            if isinstance(value, HttpBlob):
                files[key] = value.as_file_tuple()
            elif isinstance(value, (bytes, bytearray)):
                files[key] = HttpBlob(bytes(value)).as_file_tuple()
            elif hasattr(value, "read"):
                files[key] = Transport._read_file_part(value)
            else:
                fields[key] = encode_form_value(value)
        return fields, files

    @staticmethod
    def _read_file_part(stream: Any) -> FilePart:
        name = getattr(stream, "name", None)
        if not isinstance(name, str) or not name:
            name = "file"
        seekable = getattr(stream, "seekable", None)
        if seekable is not None and seekable():
            stream.seek(0)
        content = stream.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        return HttpBlob(content, name=name.replace("\\", "/").rsplit("/", 1)[-1]).as_file_tuple()

    def check_payload_size(self, size: Optional[int], url: str) -> None:
        """Бросить TransportError с сообщением о лимите POST если тело слишком большое."""
        if self.max_payload_size is None or size is None:
            return
        if size > self.max_payload_size:
            raise TransportError(POST_SIZE_LIMIT_MESSAGE, url)

    def check_status(self, response: HttpResponse, options: FetchOptions) -> HttpResponse:
        if options.mute_http_exceptions or response.status_code < 400:
            return response
        raise HTTPError(
            response.status_code,
            mask_token(response.url),
            response.get_content_text()[:200],
        )
