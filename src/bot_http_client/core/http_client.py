# src/bot_http_client/core/http_client.py
import asyncio
import inspect
from typing import Any, Awaitable, Callable, Mapping, Optional, TYPE_CHECKING

from .exceptions import (
    PostSizeExceedLimitError,
    TooManyRequestsError,
    TooManyRetriesError,
    TransportError,
)
from .options import FetchOptions, RetryHandler, RetryRequest
from .response import HttpResponse
from .utils import mask_token

if TYPE_CHECKING:
    from ..transports.base import Transport

POST_SIZE_LIMIT_MARKER = "Limit Exceeded: URLFetch POST Size"

# Статус "ответа нет" (транспорт не смог выполнить запрос)
NO_RESPONSE_STATUS = 9999

RATE_LIMIT_STATUS = 429

Sleep = Callable[[float], Awaitable[Any]]


class HTTPClient:
    """
    HTTP клиент с ретраями поверх сменного транспорта.

    Ретраи управляются только статус кодом: тело ответа используется лишь
    для текста ошибки. Решение о паузе перед повтором принимает колбэк
    handle_retry (по умолчанию - пауза retry_second).

    Example:
        >>> client = HTTPClient(HttpxTransport(), retry_second=2)
        >>> res = await client.fetch_with_retry(
        ...     RetryRequest(url="https://api.example.com/items", retry=3)
        ... )

    Raises (fetch_with_retry):
        PostSizeExceedLimitError: тело больше лимита транспорта (без ретраев)
        TooManyRequestsError: статус 429 (без ретраев, несёт ответ)
        TooManyRetriesError: бюджет повторов исчерпан
    """

    def __init__(
        self,
        transport: "Transport",
        retry_second: float = 1.0,
        logger=None,
        sleep: Optional[Sleep] = None,
    ):
        """
        Args:
            transport: Бэкенд (HttpxTransport, RequestsTransport)
            retry_second: Пауза перед повтором по умолчанию (сек)
            logger: ClientLogger (опционально)
            sleep: Корутина паузы (по умолчанию asyncio.sleep)
        """
        if retry_second < 0:
            raise ValueError("retry_second must be non-negative")

        self._transport = transport
        self._retry_second = retry_second
        self._logger = logger
        self._sleep = sleep or asyncio.sleep

    @property
    def transport(self) -> "Transport":
        return self._transport

    @property
    def sleep(self) -> Sleep:
        return self._sleep

    @property
    def logger(self):
        return self._logger

    def get_retry_second(self) -> float:
        return self._retry_second

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ==================== Запросы ====================

    async def fetch(self, url: str, options: Optional[FetchOptions] = None) -> HttpResponse:
        """
        Выполнить один запрос без ретраев.

        Args:
            url: URL
            options: Параметры запроса

        Returns:
            HttpResponse
        """
        options = options or FetchOptions()
        if self._logger:
            self._logger.debug(mask_token(url), options=options.describe())
        return await self._transport.fetch(url, options)

    async def fetch_with_retry(self, request: RetryRequest) -> HttpResponse:
        """
        Выполнить запрос с ретраями.

        Каждая попытка идёт с mute_http_exceptions=True. Статус < 400 - успех,
        бюджет не тратится. Иначе (или если ответа нет - статус 9999):
        лимит POST -> PostSizeExceedLimitError, 429 -> TooManyRequestsError,
        бюджет 0 -> TooManyRetriesError, иначе колбэк и новая попытка.

        Args:
            request: url, параметры, бюджет повторов и колбэк

        Returns:
            HttpResponse со статусом < 400
        """
        url = request.url
        options = request.options.for_retry()
        retry = request.retry

        while True:
            res: Optional[HttpResponse] = None
            error_message: Optional[str] = None
            try:
                res = await self.fetch(url, options)
            except TransportError as e:
                # Address unavailable, timeout и т.п. - ответа нет
                error_message = e.message

            status_code = res.status_code if res is not None else NO_RESPONSE_STATUS
            if status_code < 400:
                return res

            if error_message is None:
                error_message = res.get_content_text()
            if self._logger:
                self._logger.info(
                    f"fetch error: {error_message}",
                    status_code=status_code,
                    retry_left=retry,
                )

            if POST_SIZE_LIMIT_MARKER in error_message:
                raise PostSizeExceedLimitError()

            if status_code == RATE_LIMIT_STATUS:
                raise TooManyRequestsError(res)

            if retry <= 0:
                error = TooManyRetriesError(error_message, mask_token(url))
                if self._logger:
                    self._logger.info(str(error), status_code=status_code)
                raise error

            retry -= 1
            await self._run_retry_handler(request.handle_retry, res)

    async def _run_retry_handler(
        self,
        handle_retry: Optional[RetryHandler],
        res: Optional[HttpResponse],
    ) -> None:
        if handle_retry is None:
            await self.default_handle_retry(res)
            return

        result = handle_retry(res)
        if inspect.isawaitable(result):
            await result

    async def default_handle_retry(self, res: Optional[HttpResponse] = None) -> None:
        """Пауза retry_second секунд."""
        retry_after = self._retry_second
        if self._logger:
            self._logger.info(f"Sleep for {retry_after} sec")
        await self._sleep(retry_after)

    # ==================== HTTP методы ====================

    async def get(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[FetchOptions] = None,
    ) -> HttpResponse:
        """GET запрос."""
        options = (options or FetchOptions()).replace(params=params, method="get")
        return await self.fetch(url, options)

    async def post(
        self,
        url: str,
        body: Optional[Mapping[str, Any]] = None,
        options: Optional[FetchOptions] = None,
    ) -> HttpResponse:
        """POST запрос."""
        options = (options or FetchOptions()).replace(payload=body, method="post")
        return await self.fetch(url, options)

    async def put(
        self,
        url: str,
        body: Optional[Mapping[str, Any]] = None,
        options: Optional[FetchOptions] = None,
    ) -> HttpResponse:
        """PUT запрос."""
        options = (options or FetchOptions()).replace(payload=body, method="put")
        return await self.fetch(url, options)

    async def patch(
        self,
        url: str,
        body: Optional[Mapping[str, Any]] = None,
        options: Optional[FetchOptions] = None,
    ) -> HttpResponse:
        """PATCH запрос."""
        options = (options or FetchOptions()).replace(payload=body, method="patch")
        return await self.fetch(url, options)

    async def delete(self, url: str, options: Optional[FetchOptions] = None) -> HttpResponse:
        """DELETE запрос."""
        options = (options or FetchOptions()).replace(method="delete")
        return await self.fetch(url, options)
