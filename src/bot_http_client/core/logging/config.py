"""
Настройки логирования клиента бота.

Конфиг создаётся вызывающим кодом и передаётся в ClientLogger; сам клиент
никаких глобальных логгеров не настраивает.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class LogLevel(str, Enum):
    """Уровни, которые пишет клиент (CRITICAL не используется)."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def to_int(self) -> int:
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


CONSOLE_STREAMS = ("stdout", "stderr")

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class LoggingConfig:
    """
    Конфигурация логирования.

    Attributes:
        level: Минимальный уровень
        format: json, text или colored
        enable_console: Писать в консоль
        console_stream: stdout или stderr
        enable_file: Писать в файл с ротацией
        file_path: Путь к файлу (обязателен при enable_file)
        max_bytes: Размер файла до ротации
        backup_count: Сколько старых файлов хранить
        enable_correlation_id: Добавлять id текущего вызова API
        mask_secrets: Маскировать токен бота и секретные поля
        extra_fields: Статические поля для каждой записи

    Example:
        >>> LoggingConfig.create(level="debug", format="json", extra_fields={"service": "notifier"})
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    console_stream: str = "stdout"
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    mask_secrets: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Валидация."""
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.console_stream not in CONSOLE_STREAMS:
            raise ValueError(
                f"console_stream must be one of: {', '.join(CONSOLE_STREAMS)}"
            )
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

    @classmethod
    def create(
        cls,
        level: Union[str, LogLevel] = LogLevel.INFO,
        format: Union[str, LogFormat] = LogFormat.TEXT,
        extra_fields: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> "LoggingConfig":
        """
        Создать конфиг из строковых значений (регистр не важен).

        Остальные параметры передаются как есть.

        Example:
            >>> LoggingConfig.create(level="DEBUG", enable_file=True, file_path="/tmp/bot.log")
        """
        if not isinstance(level, LogLevel):
            level = LogLevel(level.upper())
        if not isinstance(format, LogFormat):
            format = LogFormat(format.lower())
        return cls(level=level, format=format, extra_fields=extra_fields or {}, **options)
