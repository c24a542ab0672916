"""
Shard Limit Alert Configuration using pydantic-settings.

Every option can come from a ``SHARD_LIMIT_*`` environment variable or a
``.env`` file; command-line flags override them.
"""

from functools import lru_cache
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.agents.shard_limit.shard_limit.services.exceptions import ConfigurationError
from src.agents.shard_limit.shard_limit.services.prometheus_query_fetcher import (
    DEFAULT_PROMETHEUS_URL,
)
from src.agents.shard_limit.shard_limit.services.telegram_notifier import DEFAULT_TOKEN_FILE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ShardLimitSettings(BaseSettings):
    """Shard limit alert configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHARD_LIMIT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Prometheus
    prometheus_url: str = Field(
        default=DEFAULT_PROMETHEUS_URL,
        description="Prometheus server address with scheme, address and port",
    )
    query: str = Field(
        default="wbx_catalog_storage_limit-wbx_catalog_storage_size",
        description="Metric expression used as query API param",
    )
    request_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Request timeout for Prometheus API in seconds",
    )

    # Telegram
    telegram_bot_token_file: str = Field(
        default=DEFAULT_TOKEN_FILE,
        description="Path to file with telegram bot token (talk to @BotFather to get one)",
    )
    telegram_chat_id: int = Field(
        default=0,
        description="Telegram chat id to report alerts to",
    )

    # Alerting
    alert_threshold: int = Field(
        default=1000,
        description="Send alert if at least one shard has free product slots at or below this value",
    )
    dry_run: bool = Field(default=False, description="Log the alert instead of sending it")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def validate_required(self) -> None:
        """Check options that have no usable default.

        Raises:
            ConfigurationError: If the chat id is missing
        """
        if self.telegram_chat_id == 0 and not self.dry_run:
            raise ConfigurationError(
                "telegram-chat-id is required, add @RawDataBot to your chat to find it out"
            )

    def to_log_dict(self) -> Dict[str, Any]:
        """Options for the startup log line."""
        return self.model_dump()


@lru_cache
def get_settings() -> ShardLimitSettings:
    """Get cached settings instance."""
    return ShardLimitSettings()
