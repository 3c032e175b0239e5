"""
Асинхронный транспорт на базе httpx.
"""

from typing import Any, Dict, Optional

import httpx

from ..core.exceptions import classify_httpx_exception
from ..core.options import FetchOptions
from ..core.response import HttpResponse
from ..core.utils import charset_from_content_type, mask_token
from .base import Transport


class HttpxTransport(Transport):
    """
    Бэкенд на httpx.AsyncClient.

    Клиент создаётся лениво или передаётся снаружи (тогда он не закрывается
    в close()).

    Examples:
        >>> async with HttpxTransport(timeout=30) as transport:
        ...     res = await transport.fetch("https://api.example.com/ping", FetchOptions())
    """

    name = "httpx"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        max_payload_size: Optional[int] = None,
    ):
        super().__init__(timeout=timeout, max_payload_size=max_payload_size)
        self._owns_client = client is None
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, options: FetchOptions) -> HttpResponse:
        url = self.build_url(url, options)
        client = self._get_client()

        request = client.build_request(
            options.method.upper(),
            url,
            headers=self.build_headers(options),
            **self._body_kwargs(options),
        )
        self.check_payload_size(_content_length(request), mask_token(url))

        try:
            res = await client.send(request, follow_redirects=options.follow_redirects)
        except httpx.HTTPError as e:
            raise classify_httpx_exception(e, mask_token(url)) from e

        return self.check_status(self._to_response(res), options)

    def _body_kwargs(self, options: FetchOptions) -> Dict[str, Any]:
        payload = options.payload
        if payload is None:
            return {}
        if isinstance(payload, (str, bytes)):
            return {"content": payload}

        fields, files = self.split_payload(payload)
        if files:
            return {"data": fields, "files": files}
        return {"data": fields}

    @staticmethod
    def _to_response(res: httpx.Response) -> HttpResponse:
        return HttpResponse(
            status_code=res.status_code,
            headers=res.headers,
            content=res.content,
            url=str(res.url),
            encoding=charset_from_content_type(res.headers.get("Content-Type")),
            set_cookies=res.headers.get_list("Set-Cookie") or None,
        )


def _content_length(request: httpx.Request) -> Optional[int]:
    value = request.headers.get("Content-Length")
    if value is None:
        return None
    return int(value)
