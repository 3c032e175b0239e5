"""
Система конфигурации клиента.

Все конфиги immutable (frozen dataclasses).
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

TRANSPORTS = ("httpx", "requests")

DEFAULT_API_HOST = "api.telegram.org"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryConfig:
    """
    Конфигурация ретраев.

    Внутренний (HTTP) и внешний (rate limit) бюджеты независимы.

    Args:
        max_retry: Повторов во внутреннем цикле HTTPClient (не считая первую попытку)
        retry_second: Пауза перед повтором по умолчанию (сек)
        max_rate_limit_retry: Повторов внешнего цикла после 429

    Examples:
        >>> RetryConfig(max_retry=3, retry_second=2)
        >>> RetryConfig(max_rate_limit_retry=0)  # 429 сразу пробрасывается
    """
    max_retry: int = 0
    retry_second: float = 1.0
    max_rate_limit_retry: int = 3

    def __post_init__(self):
        """Валидация."""
        if self.max_retry < 0:
            raise ValueError("max_retry must be non-negative")
        if self.retry_second < 0:
            raise ValueError("retry_second must be non-negative")
        if self.max_rate_limit_retry < 0:
            raise ValueError("max_rate_limit_retry must be non-negative")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class BotClientConfig:
    """
    Главная конфигурация клиента бота.

    Args:
        retry: Конфигурация ретраев
        logging: Конфигурация логирования (None - без логов)
        debug: Писать debug сообщения (url и параметры каждого запроса)
        transport: Бэкенд: "httpx" или "requests"
        timeout: Таймаут одной попытки (сек), None - без таймаута
        max_payload_size: Лимит тела запроса (байты), None - без лимита
        api_host: Хост Bot API

    Examples:
        >>> BotClientConfig.create(max_retry=3, transport="requests")
    """
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: Optional["LoggingConfig"] = None
    debug: bool = False
    transport: str = "httpx"
    timeout: Optional[float] = None
    max_payload_size: Optional[int] = None
    api_host: str = DEFAULT_API_HOST

    def __post_init__(self):
        """Валидация."""
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Unknown transport: {self.transport}. Available: {', '.join(TRANSPORTS)}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_payload_size is not None and self.max_payload_size <= 0:
            raise ValueError("max_payload_size must be positive")
        if not self.api_host:
            raise ValueError("api_host must not be empty")

    @classmethod
    def create(
        cls,
        max_retry: int = 0,
        retry_second: float = 1.0,
        max_rate_limit_retry: int = 3,
        logging: Optional["LoggingConfig"] = None,
        debug: bool = False,
        transport: str = "httpx",
        timeout: Optional[float] = None,
        max_payload_size: Optional[int] = None,
        api_host: str = DEFAULT_API_HOST,
    ) -> "BotClientConfig":
        """
        Создать конфиг из плоских параметров.

        Examples:
            >>> config = BotClientConfig.create(max_retry=2, retry_second=5, debug=True)
            >>> config.retry.max_retry
            2
        """
        return cls(
            retry=RetryConfig(
                max_retry=max_retry,
                retry_second=retry_second,
                max_rate_limit_retry=max_rate_limit_retry,
            ),
            logging=logging,
            debug=debug,
            transport=transport,
            timeout=timeout,
            max_payload_size=max_payload_size,
            api_host=api_host,
        )
