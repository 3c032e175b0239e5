"""
Форматтеры записей: json (для сборщиков логов), text и colored (для консоли).

Поля, переданные через kwargs ClientLogger (status_code, retry_left,
endpoint, correlation_id ...), выводятся во всех форматах.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Type

# Стандартные атрибуты LogRecord - не выводятся как поля
RESERVED_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'taskName',
})

TEXT_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
TEXT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

RESET = '\033[0m'
LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
}


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Поля записи, добавленные через extra или фильтрами."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in RESERVED_FIELDS and not key.startswith('_')
    }


def _utc_timestamp(created: float) -> str:
    moment = datetime.fromtimestamp(created, tz=timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JSONFormatter(logging.Formatter):
    """
    Одна запись - одна JSON строка.

    Пример:
        {"timestamp": "2024-01-15T10:30:45.123Z", "level": "INFO",
         "logger": "bot_http_client", "message": "fetch error: Bad Gateway",
         "status_code": 502, "retry_left": 1, "correlation_id": "3f9a0c1b2d4e"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key, value in extra_fields(record).items():
            entry.setdefault(key, value)
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """[время] [уровень] [логгер] сообщение key=value ..."""

    def __init__(self):
        super().__init__(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = extra_fields(record)
        if not fields:
            return line
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{line} {rendered}"


class ColoredFormatter(TextFormatter):
    """TextFormatter с ANSI цветом уровня."""

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = LEVEL_COLORS.get(original)
        if color:
            record.levelname = f"{color}{original}{RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


FORMATTERS: Dict[str, Type[logging.Formatter]] = {
    "json": JSONFormatter,
    "text": TextFormatter,
    "colored": ColoredFormatter,
}


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Форматтер по имени (json, text, colored).

    Raises:
        ValueError: неизвестный формат
    """
    formatter_class = FORMATTERS.get(format_type.lower())
    if formatter_class is None:
        raise ValueError(
            f"Unknown log format: {format_type}. Available: {', '.join(FORMATTERS)}"
        )
    return formatter_class()
