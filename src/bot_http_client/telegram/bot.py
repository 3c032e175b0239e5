"""
Telegram Bot API client on top of HTTPClient.

Two retry layers:
- inner: HTTPClient.fetch_with_retry with handle_retry as the decision
  callback (API error classification, server directed backoff)
- outer: _fetch re-issues the whole call after TooManyRequestsError,
  sleeping for ``parameters.retry_after`` from the attached response
"""

import json
import math
import uuid
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core.config import BotClientConfig, DEFAULT_API_HOST
from ..core.exceptions import TooManyRequestsError
from ..core.http_client import HTTPClient
from ..core.logging import ClientLogger, clear_correlation_id, set_correlation_id
from ..core.options import FetchOptions, RetryRequest, is_binary
from ..core.response import HttpResponse
from ..transports import create_transport
from .exceptions import TelegramFileTooLargeError, TelegramSendMediaByUrlError
from .types import (
    TelegramBot,
    TelegramRecipient,
    TelegramResponse,
    TelegramResponseResult,
    parse_response,
)

DEFAULT_PARSE_MODE = "HTML"

# Telegram could not fetch a remotely hosted media URL
SEND_MEDIA_BY_URL_ERRORS = (
    "failed to get http url content",
    "wrong file identifier/http url specified",
    "group send failed",
    "wrong type of the web page content",
    "wrong remote file identifier specified",
)

FILE_TOO_LARGE_ERRORS = (
    "file is too big",
    "request entity too large",
    "file too large",
)

# Statuses whose description is checked against the lists above
CLASSIFIED_STATUSES = (400, 413)


class TelegramBotClient:
    """
    Endpoint oriented Bot API client.

    Every endpoint call returns the parsed envelope (also when ``ok`` is
    false and nothing fatal was detected) or raises one of the fatal errors:
    TelegramSendMediaByUrlError, TelegramFileTooLargeError,
    PostSizeExceedLimitError, TooManyRetriesError, or TooManyRequestsError
    once the rate limit budget is spent. A None return means the body was
    not a valid envelope.

    Example:
        >>> bot = TelegramBot(name="notifier", token="123456:ABC-DEF")
        >>> recipient = TelegramRecipient(bot=bot, chat_id=-1001234567890)
        >>> async with TelegramBotClient.from_config(BotClientConfig.create(max_retry=3)) as client:
        ...     res = await client.send_message(recipient, "<b>Build passed</b>")
    """

    def __init__(
        self,
        http_client: HTTPClient,
        max_retry: int = 0,
        retry_second: Optional[float] = None,
        max_rate_limit_retry: int = 3,
        logger=None,
        sleep=None,
        api_host: str = DEFAULT_API_HOST,
    ):
        """
        Args:
            http_client: HTTPClient used for every call
            max_retry: Inner retry budget per call
            retry_second: Default backoff (defaults to the HTTP client's)
            max_rate_limit_retry: Outer retry budget for rate limiting
            logger: ClientLogger (defaults to the HTTP client's)
            sleep: Sleep coroutine (defaults to the HTTP client's)
            api_host: Bot API host
        """
        if max_retry < 0:
            raise ValueError("max_retry must be non-negative")
        if max_rate_limit_retry < 0:
            raise ValueError("max_rate_limit_retry must be non-negative")

        self.max_retry = max_retry
        self.max_rate_limit_retry = max_rate_limit_retry
        self.retry_second = (
            retry_second if retry_second is not None else http_client.get_retry_second()
        )
        self.api_host = api_host
        self._http = http_client
        self._logger = logger if logger is not None else http_client.logger
        self._sleep = sleep or http_client.sleep

    @classmethod
    def from_config(cls, config: BotClientConfig, sleep=None) -> "TelegramBotClient":
        """Build the logger, transport and HTTP client described by config."""
        logger = None
        if config.logging is not None or config.debug:
            logger = ClientLogger(config.logging, debug=config.debug)

        transport = create_transport(
            config.transport,
            timeout=config.timeout,
            max_payload_size=config.max_payload_size,
        )
        http_client = HTTPClient(
            transport,
            retry_second=config.retry.retry_second,
            logger=logger,
            sleep=sleep,
        )
        return cls(
            http_client,
            max_retry=config.retry.max_retry,
            max_rate_limit_retry=config.retry.max_rate_limit_retry,
            logger=logger,
            api_host=config.api_host,
        )

    @property
    def http_client(self) -> HTTPClient:
        return self._http

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "TelegramBotClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ==================== Endpoints ====================

    async def send_message(
        self, recipient: TelegramRecipient, text: str, **fields: Any
    ) -> Optional[TelegramResponse]:
        payload = self._with_defaults(recipient, fields, text=text)
        return await self._send(recipient, "sendMessage", payload)

    async def send_photo(
        self, recipient: TelegramRecipient, photo: Any, **fields: Any
    ) -> Optional[TelegramResponse]:
        """photo: file_id, URL, bytes or HttpBlob."""
        payload = self._with_defaults(recipient, fields, photo=photo)
        return await self._send(recipient, "sendPhoto", payload)

    async def send_audio(
        self, recipient: TelegramRecipient, audio: Any, **fields: Any
    ) -> Optional[TelegramResponse]:
        payload = self._with_defaults(recipient, fields, audio=audio)
        return await self._send(recipient, "sendAudio", payload)

    async def send_video(
        self, recipient: TelegramRecipient, video: Any, **fields: Any
    ) -> Optional[TelegramResponse]:
        payload = self._with_defaults(recipient, fields, video=video)
        return await self._send(recipient, "sendVideo", payload)

    async def send_animation(
        self, recipient: TelegramRecipient, animation: Any, **fields: Any
    ) -> Optional[TelegramResponse]:
        payload = self._with_defaults(recipient, fields, animation=animation)
        return await self._send(recipient, "sendAnimation", payload)

    async def send_document(
        self, recipient: TelegramRecipient, document: Any, **fields: Any
    ) -> Optional[TelegramResponse]:
        payload = self._with_defaults(recipient, fields, document=document)
        return await self._send(recipient, "sendDocument", payload)

    async def send_media_group(
        self,
        recipient: TelegramRecipient,
        media: List[Mapping[str, Any]],
        **fields: Any,
    ) -> Optional[TelegramResponse]:
        """
        Send an album.

        The first item gets the default parse_mode, ``duration`` values are
        rounded to integers and binary ``media`` values are uploaded as
        ``attach://file<i>`` parts. The list is sent as one JSON field.
        """
        items, attachments = build_media_group(media)
        payload: Dict[str, Any] = {
            "chat_id": recipient.chat_id,
            **fields,
            "media": json.dumps(items),
            **attachments,
        }
        return await self._send(recipient, "sendMediaGroup", payload)

    async def pin_chat_message(
        self, recipient: TelegramRecipient, message_id: int, **fields: Any
    ) -> Optional[TelegramResponse]:
        payload = {"chat_id": recipient.chat_id, "message_id": message_id, **fields}
        options = FetchOptions(method="post", payload=payload)
        return await self._fetch(recipient.bot, "pinChatMessage", options)

    async def get_me(self, bot: TelegramBot) -> Optional[TelegramResponse]:
        return await self._fetch(bot, "getMe", FetchOptions(method="get"))

    async def get_updates(
        self,
        bot: TelegramBot,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        timeout: Optional[int] = None,
        allowed_updates: Optional[List[str]] = None,
    ) -> Optional[TelegramResponse]:
        """Long polling for incoming updates."""
        params: Dict[str, Any] = {}
        if offset is not None:
            params["offset"] = offset
        if limit is not None:
            params["limit"] = limit
        if timeout is not None:
            params["timeout"] = timeout
        if allowed_updates is not None:
            params["allowed_updates"] = json.dumps(allowed_updates)

        options = FetchOptions(method="get", params=params or None)
        return await self._fetch(bot, "getUpdates", options)

    @staticmethod
    def get_file_id(
        result: Union[TelegramResponseResult, Mapping[str, Any]]
    ) -> Optional[str]:
        """
        file_id of the media attached to a sent message.

        Preference: largest photo size, video, audio, document, animation.

        Examples:
            >>> TelegramBotClient.get_file_id({"photo": [{"file_id": "a"}, {"file_id": "b"}]})
            'b'
            >>> TelegramBotClient.get_file_id({"text": "hi"}) is None
            True
        """
        if isinstance(result, TelegramResponseResult):
            if result.photo:
                return result.photo[-1].file_id
            for media in (result.video, result.audio, result.document, result.animation):
                if media is not None:
                    return media.file_id
            return None

        # остальные поля сообщения не валидируются
        photo = result.get("photo")
        if isinstance(photo, list) and photo and isinstance(photo[-1], Mapping):
            return photo[-1].get("file_id")
        for field in ("video", "audio", "document", "animation"):
            media = result.get(field)
            if isinstance(media, Mapping):
                return media.get("file_id")
        return None

    # ==================== Retry policy ====================

    async def handle_retry(self, res: Optional[HttpResponse] = None) -> None:
        """
        Decide what happens before the inner loop retries.

        - 429: sleep for ``parameters.retry_after``
        - 400/413 with a media URL description: TelegramSendMediaByUrlError
        - 400/413 with a file size description: TelegramFileTooLargeError
        - otherwise: sleep retry_second
        """
        retry_after = self.retry_second

        if res is not None:
            status_code = res.status_code
            error = parse_response(res.get_content_text())

            if status_code == 429:
                if error is not None and error.retry_after is not None:
                    retry_after = error.retry_after
            elif status_code in CLASSIFIED_STATUSES:
                description = _error_description(error, res)
                lowered = description.lower()
                if any(marker in lowered for marker in SEND_MEDIA_BY_URL_ERRORS):
                    raise TelegramSendMediaByUrlError(description)
                if any(marker in lowered for marker in FILE_TOO_LARGE_ERRORS):
                    raise TelegramFileTooLargeError(description)

        if self._logger:
            self._logger.info(f"Sleep for {retry_after} sec")
        await self._sleep(retry_after)

    def get_api(self, token: str) -> str:
        return f"https://{self.api_host}/bot{token}"

    async def _fetch(
        self, bot: TelegramBot, endpoint: str, options: FetchOptions
    ) -> Optional[TelegramResponse]:
        url = f"{self.get_api(bot.token)}/{endpoint}"
        rate_limit_retry = self.max_rate_limit_retry

        if self._logger:
            set_correlation_id(uuid.uuid4().hex[:12])

        try:
            while True:
                try:
                    res = await self._http.fetch_with_retry(
                        RetryRequest(
                            url=url,
                            options=options,
                            retry=self.max_retry,
                            handle_retry=self.handle_retry,
                        )
                    )
                except TooManyRequestsError as e:
                    if rate_limit_retry <= 0:
                        raise
                    rate_limit_retry -= 1
                    retry_after = self._rate_limit_delay(e.response)
                    if self._logger:
                        self._logger.info(
                            f"Rate limited, sleep for {retry_after} sec",
                            endpoint=endpoint,
                            rate_limit_retry_left=rate_limit_retry,
                        )
                    await self._sleep(retry_after)
                    continue

                return parse_response(res.get_content_text())
        finally:
            if self._logger:
                clear_correlation_id()

    # ==================== Helpers ====================

    def _rate_limit_delay(self, res: Optional[HttpResponse]) -> float:
        if res is not None:
            error = parse_response(res.get_content_text())
            if error is not None and error.retry_after is not None:
                return error.retry_after
        return self.retry_second

    @staticmethod
    def _with_defaults(
        recipient: TelegramRecipient, fields: Mapping[str, Any], **required: Any
    ) -> Dict[str, Any]:
        # caller fields override defaults
        return {
            "parse_mode": DEFAULT_PARSE_MODE,
            "chat_id": recipient.chat_id,
            **required,
            **fields,
        }

    async def _send(
        self, recipient: TelegramRecipient, endpoint: str, payload: Dict[str, Any]
    ) -> Optional[TelegramResponse]:
        options = FetchOptions(method="post", payload=payload)
        res = await self._fetch(recipient.bot, endpoint, options)
        if recipient.pin_all_message:
            await self._pin_sent(recipient, res)
        return res

    async def _pin_sent(
        self, recipient: TelegramRecipient, res: Optional[TelegramResponse]
    ) -> None:
        if res is None or not res.ok:
            return
        results = res.results()
        if not results or results[0].message_id is None:
            return
        await self.pin_chat_message(
            recipient, results[0].message_id, disable_notification=True
        )


def round_duration(value: Any) -> Any:
    """Round a numeric duration half up; the API rejects fractional durations."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    return int(math.floor(value + 0.5))


def build_media_group(media: List[Mapping[str, Any]]):
    """
    Prepare sendMediaGroup items.

    Returns:
        (items, attachments): JSON-ready items and the binary parts keyed
        by their ``attach://`` name

    Examples:
        >>> build_media_group([{"type": "video", "media": "https://x/v.mp4", "duration": 2.7}])
        ([{'parse_mode': 'HTML', 'type': 'video', 'media': 'https://x/v.mp4', 'duration': 3}], {})
    """
    items: List[Dict[str, Any]] = []
    attachments: Dict[str, Any] = {}

    for index, source in enumerate(media):
        item = dict(source)
        if index == 0:
            item = {"parse_mode": DEFAULT_PARSE_MODE, **item}
        if "duration" in item:
            item["duration"] = round_duration(item["duration"])
        if is_binary(item.get("media")):
            name = f"file{index}"
            attachments[name] = item["media"]
            item["media"] = f"attach://{name}"
        items.append(item)

    return items, attachments


def _error_description(error: Optional[TelegramResponse], res: HttpResponse) -> str:
    if error is not None and error.description:
        return error.description
    if error is None:
        # non-JSON error page (e.g. 413 from the front proxy)
        return res.get_content_text()
    return ""
