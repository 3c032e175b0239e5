"""Telegram Bot API client with rate-limit aware retries."""

from .bot import TelegramBotClient, build_media_group, round_duration
from .exceptions import TelegramError, TelegramFileTooLargeError, TelegramSendMediaByUrlError
from .types import (
    TG_MAX_CAPTION_LEN,
    TG_MAX_MESSAGE_LEN,
    ResponseParameters,
    TelegramBot,
    TelegramFile,
    TelegramRecipient,
    TelegramResponse,
    TelegramResponseResult,
    parse_response,
)

__all__ = [
    "TelegramBotClient",
    "build_media_group",
    "round_duration",
    "TelegramError",
    "TelegramFileTooLargeError",
    "TelegramSendMediaByUrlError",
    "TG_MAX_CAPTION_LEN",
    "TG_MAX_MESSAGE_LEN",
    "ResponseParameters",
    "TelegramBot",
    "TelegramFile",
    "TelegramRecipient",
    "TelegramResponse",
    "TelegramResponseResult",
    "parse_response",
]
