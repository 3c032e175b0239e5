"""
ClientLogger - логгер, который передаётся в HTTPClient и TelegramBotClient.

Глобального логгера нет: компоненты получают экземпляр в конструкторе и
при logger=None ничего не пишут.
"""

import logging
from typing import Any, Dict, List, Optional

from ..utils import mask_sensitive_data
from .config import LoggingConfig, LogLevel
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter
from .handlers import create_console_handler, create_file_handler


class ClientLogger:
    """
    Обёртка над logging.Logger с полями записи в виде kwargs.

    - консоль и/или файл с ротацией
    - форматы json, text, colored
    - correlation id текущего вызова API
    - токен бота и секретные поля маскируются (mask_secrets)

    Example:
        >>> logger = ClientLogger(LoggingConfig.create(format="colored"))
        >>> logger.info("Sleep for 3 sec", endpoint="sendMessage")
    """

    def __init__(
        self,
        config: Optional[LoggingConfig] = None,
        name: str = "bot_http_client",
        debug: bool = False,
    ):
        """
        Args:
            config: Конфиг (по умолчанию LoggingConfig())
            name: Имя stdlib логгера
            debug: Принудительно уровень DEBUG
        """
        self.config = config or LoggingConfig()
        self.name = name
        self.level = LogLevel.DEBUG if debug else self.config.level
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.level.to_int())
        self._logger.propagate = False
        # повторная инициализация с тем же именем заменяет обработчики
        self._logger.handlers.clear()

        for handler in self._build_handlers():
            self._logger.addHandler(handler)

    def _build_filters(self) -> List[logging.Filter]:
        filters: List[logging.Filter] = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))
        return filters

    def _build_handlers(self) -> List[logging.Handler]:
        config = self.config
        level = self.level.to_int()
        formatter = get_formatter(config.format.value)
        filters = self._build_filters()

        handlers: List[logging.Handler] = []
        if config.enable_console:
            handlers.append(
                create_console_handler(level, formatter, filters, stream=config.console_stream)
            )
        if config.enable_file and config.file_path:
            handlers.append(
                create_file_handler(
                    config.file_path,
                    level,
                    formatter,
                    max_bytes=config.max_bytes,
                    backup_count=config.backup_count,
                    filters=filters,
                )
            )
        return handlers

    def _log(self, level: int, message: Any, fields: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if self.config.mask_secrets:
            message = mask_sensitive_data(message)
            fields = mask_sensitive_data(fields)
        if not isinstance(message, str):
            message = repr(message)
        self._logger.log(level, message, extra=fields)

    def is_debug_enabled(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    def debug(self, message: Any, **fields: Any) -> None:
        """Debug запись; не-строковые сообщения пишутся через repr."""
        self._log(logging.DEBUG, message, fields)

    def info(self, message: Any, **fields: Any) -> None:
        """
        Info запись.

        Example:
            >>> logger.info("fetch error: Bad Gateway", status_code=502, retry_left=2)
        """
        self._log(logging.INFO, message, fields)

    def warning(self, message: Any, **fields: Any) -> None:
        self._log(logging.WARNING, message, fields)

    def error(self, message: Any, **fields: Any) -> None:
        self._log(logging.ERROR, message, fields)

    def close(self) -> None:
        """Закрыть обработчики. Повторный вызов ничего не делает."""
        if self._closed:
            return

        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self) -> "ClientLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
