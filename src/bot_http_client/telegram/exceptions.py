"""
Ошибки Telegram Bot API.

Обе фатальные: повтор запроса с теми же данными не поможет.
"""

from typing import Optional

from ..core.exceptions import FatalError


class TelegramError(FatalError):
    """Базовая ошибка Bot API."""

    def __init__(self, message: str, description: Optional[str] = None):
        self.description = description
        super().__init__(message)


class TelegramSendMediaByUrlError(TelegramError):
    """Telegram не смог скачать медиа по URL."""

    def __init__(self, description: Optional[str] = None):
        super().__init__("send media by url error", description)


class TelegramFileTooLargeError(TelegramError):
    """Файл больше лимита Bot API."""

    def __init__(self, description: Optional[str] = None):
        super().__init__("file too large", description)
