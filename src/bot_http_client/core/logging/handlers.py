"""
Консольный и файловый (с ротацией) обработчики логов.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Sequence

from .config import DEFAULT_MAX_BYTES


def _configure(
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]],
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for log_filter in filters or ():
        handler.addFilter(log_filter)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None,
    stream: str = "stdout",
) -> logging.StreamHandler:
    """
    Обработчик для консоли.

    Args:
        level: Уровень (logging.INFO и т.п.)
        formatter: Форматтер
        filters: Фильтры обработчика
        stream: "stdout" или "stderr"
    """
    handler = logging.StreamHandler(sys.stderr if stream == "stderr" else sys.stdout)
    _configure(handler, level, formatter, filters)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = 5,
    filters: Optional[List[logging.Filter]] = None,
) -> RotatingFileHandler:
    """
    Файл с ротацией по размеру; каталог создаётся при необходимости.

    Example:
        >>> handler = create_file_handler("/var/log/bot/client.log", logging.INFO, JSONFormatter())
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    _configure(handler, level, formatter, filters)
    return handler
