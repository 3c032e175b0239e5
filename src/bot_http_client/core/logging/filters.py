"""
Log filters for adding context to records.

The correlation ID lives in a context variable so each API call running on
the event loop keeps its own value.
"""

import logging
from contextvars import ContextVar
from typing import Dict, Any, Optional


_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str) -> None:
    """
    Set correlation ID for the current context.

    Example:
        >>> set_correlation_id("call-12345")
        >>> logger.info("Sleep for 1 sec")  # Will include correlation_id
    """
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID for the current context (None if not set)."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear correlation ID for the current context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Filter that adds the current correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Filter that adds extra static fields to all log records.

    Example:
        >>> filter = ExtraFieldsFilter({"service": "notifier", "environment": "prod"})
        >>> handler.addFilter(filter)
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
