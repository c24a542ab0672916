"""Shard Limit Alert Services."""

from src.agents.shard_limit.shard_limit.services.exceptions import (
    ShardLimitError,
    ConfigurationError,
    TokenFileError,
    MetricsRequestError,
    MetricsResponseError,
    MalformedValueError,
    NotificationError,
)
from src.agents.shard_limit.shard_limit.services.models import (
    CATEGORY_SHARD_TYPE,
    PrometheusResponse,
    PrometheusResult,
    ShardStatus,
    NotificationResult,
    AlertResult,
)
from src.agents.shard_limit.shard_limit.services.prometheus_query_fetcher import (
    PrometheusQueryFetcher,
)
from src.agents.shard_limit.shard_limit.services.shard_status_collector import (
    ShardStatusCollector,
    format_shard_list,
)
from src.agents.shard_limit.shard_limit.services.table_renderer import (
    AlertTableRenderer,
)
from src.agents.shard_limit.shard_limit.services.telegram_notifier import (
    TelegramMessage,
    TelegramNotifier,
    load_bot_token,
)
from src.agents.shard_limit.shard_limit.services.notification_router import (
    NotificationRouter,
)

__all__ = [
    "ShardLimitError",
    "ConfigurationError",
    "TokenFileError",
    "MetricsRequestError",
    "MetricsResponseError",
    "MalformedValueError",
    "NotificationError",
    "CATEGORY_SHARD_TYPE",
    "PrometheusResponse",
    "PrometheusResult",
    "ShardStatus",
    "NotificationResult",
    "AlertResult",
    "PrometheusQueryFetcher",
    "ShardStatusCollector",
    "format_shard_list",
    "AlertTableRenderer",
    "TelegramMessage",
    "TelegramNotifier",
    "load_bot_token",
    "NotificationRouter",
]
