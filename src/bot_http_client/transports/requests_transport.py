"""
Транспорт на базе requests.

requests блокирующий, поэтому вызов выполняется в отдельном потоке
через asyncio.to_thread и не блокирует event loop.
"""

import asyncio
from typing import Any, Dict, Optional

import requests

from ..core.exceptions import classify_requests_exception
from ..core.options import FetchOptions
from ..core.response import HttpResponse
from ..core.utils import charset_from_content_type, mask_token
from .base import Transport


class RequestsTransport(Transport):
    """
    Бэкенд на requests.Session.

    Examples:
        >>> transport = RequestsTransport(timeout=30)
        >>> res = await transport.fetch("https://api.example.com/ping", FetchOptions())
        >>> await transport.close()
    """

    name = "requests"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        max_payload_size: Optional[int] = None,
    ):
        super().__init__(timeout=timeout, max_payload_size=max_payload_size)
        self._owns_session = session is None
        self._session = session or requests.Session()

    @property
    def session(self) -> requests.Session:
        return self._session

    async def fetch(self, url: str, options: FetchOptions) -> HttpResponse:
        return await asyncio.to_thread(self._send, url, options)

    async def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def _send(self, url: str, options: FetchOptions) -> HttpResponse:
        url = self.build_url(url, options)
        request = requests.Request(
            method=options.method.upper(),
            url=url,
            headers=self.build_headers(options),
            **self._body_kwargs(options),
        )
        prepared = self._session.prepare_request(request)
        self.check_payload_size(_body_size(prepared.body), mask_token(url))

        try:
            res = self._session.send(
                prepared,
                allow_redirects=options.follow_redirects,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, mask_token(url)) from e

        return self.check_status(self._to_response(res), options)

    def _body_kwargs(self, options: FetchOptions) -> Dict[str, Any]:
        payload = options.payload
        if payload is None:
            return {}
        if isinstance(payload, (str, bytes)):
            return {"data": payload}

        fields, files = self.split_payload(payload)
        if files:
            return {"data": fields, "files": files}
        return {"data": fields}

    @staticmethod
    def _to_response(res: requests.Response) -> HttpResponse:
        set_cookies = None
        getlist = getattr(getattr(res.raw, "headers", None), "getlist", None)
        if callable(getlist):
            set_cookies = getlist("Set-Cookie") or None

        return HttpResponse(
            status_code=res.status_code,
            headers=res.headers,
            content=res.content,
            url=res.url,
            encoding=charset_from_content_type(res.headers.get("Content-Type")),
            set_cookies=set_cookies,
        )


def _body_size(body: Any) -> Optional[int]:
    if body is None:
        return 0
    if isinstance(body, str):
        return len(body.encode("utf-8"))
    if isinstance(body, (bytes, bytearray)):
        return len(body)
    return None
