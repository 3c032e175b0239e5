"""
Configuration loader from environment variables and .env files.

The client itself never reads the environment; this module is an opt-in
helper that turns BOT_CLIENT_* variables into a BotClientConfig.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import BotClientConfig, DEFAULT_API_HOST, RetryConfig
from .logging.config import LoggingConfig


class BotClientSettings(BaseSettings):
    """
    Bot client configuration from environment variables.

    Reads from:
    1. Environment variables (BOT_CLIENT_*)
    2. .env file
    3. Defaults

    Example .env file:
        BOT_CLIENT_MAX_RETRY=3
        BOT_CLIENT_RETRY_SECOND=2
        BOT_CLIENT_TRANSPORT=requests
        BOT_CLIENT_DEBUG=true
        BOT_CLIENT_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix='BOT_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Retry
    max_retry: int = Field(default=0, ge=0)
    retry_second: float = Field(default=1.0, ge=0)
    max_rate_limit_retry: int = Field(default=3, ge=0)

    # Transport
    transport: Literal["httpx", "requests"] = Field(default="httpx")
    timeout: Optional[float] = Field(default=None, gt=0)
    max_payload_size: Optional[int] = Field(default=None, gt=0)
    api_host: str = Field(default=DEFAULT_API_HOST, min_length=1)

    # Logging
    debug: bool = Field(default=False)
    log_enabled: bool = Field(default=True)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_file=self.log_file_path is not None,
            file_path=self.log_file_path,
        )


def load_from_env(env_file: Optional[str] = None, **overrides) -> BotClientConfig:
    """
    Load BotClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (BOT_CLIENT_*)
    3. .env file
    4. Defaults

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(env_file=".env.prod", max_retry=5)
    """
    # init kwargs take precedence over env and .env in pydantic-settings
    if env_file is not None:
        settings = BotClientSettings(_env_file=env_file, **overrides)
    else:
        settings = BotClientSettings(**overrides)

    return BotClientConfig(
        retry=RetryConfig(
            max_retry=settings.max_retry,
            retry_second=settings.retry_second,
            max_rate_limit_retry=settings.max_rate_limit_retry,
        ),
        logging=settings.to_logging_config(),
        debug=settings.debug,
        transport=settings.transport,
        timeout=settings.timeout,
        max_payload_size=settings.max_payload_size,
        api_host=settings.api_host,
    )
