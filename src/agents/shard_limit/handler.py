"""
Shard Limit Alert Handler.

Queries Prometheus for free catalog slots per shard and notifies the chat
about shards running out of capacity.
"""

import logging
import time
from typing import Optional

from src.agents.shard_limit.config import ShardLimitSettings, get_settings
from src.agents.shard_limit.shard_limit.services.models import AlertResult
from src.agents.shard_limit.shard_limit.services.notification_router import (
    NotificationRouter,
)
from src.agents.shard_limit.shard_limit.services.prometheus_query_fetcher import (
    PrometheusQueryFetcher,
)
from src.agents.shard_limit.shard_limit.services.shard_status_collector import (
    ShardStatusCollector,
    format_shard_list,
    get_shard_status_collector,
)
from src.agents.shard_limit.shard_limit.services.table_renderer import (
    AlertTableRenderer,
)

logger = logging.getLogger(__name__)


class ShardLimitHandler:
    """
    Shard Limit Handler.

    One run:
    1. validate configuration and chat credentials
    2. query Prometheus once
    3. collect one status per category shard (lowest value wins)
    4. select shards at or below the threshold, lowest first
    5. render the table and send it as a single message

    Any failure raises a ShardLimitError; nothing is retried.
    """

    def __init__(
        self,
        settings: Optional[ShardLimitSettings] = None,
        fetcher: Optional[PrometheusQueryFetcher] = None,
        collector: Optional[ShardStatusCollector] = None,
        renderer: Optional[AlertTableRenderer] = None,
        router: Optional[NotificationRouter] = None,
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or PrometheusQueryFetcher(
            prometheus_url=self.settings.prometheus_url,
            request_timeout=self.settings.request_timeout,
        )
        self.collector = collector or get_shard_status_collector()
        self.renderer = renderer or AlertTableRenderer()
        self._router = router

    @property
    def router(self) -> NotificationRouter:
        """Notification router, created on first use."""
        if self._router is None:
            self._router = NotificationRouter(
                chat_id=self.settings.telegram_chat_id,
                token_file=self.settings.telegram_bot_token_file,
            )
        return self._router

    def run(self) -> AlertResult:
        """Run a single shard limit check.

        Returns:
            AlertResult describing what was found and sent

        Raises:
            ShardLimitError: On any configuration, request, decode or send error
        """
        started = time.monotonic()
        settings = self.settings
        settings.validate_required()

        if not settings.dry_run:
            self.router.verify()

        logger.info(f"send prometheus request to {settings.prometheus_url}")
        request_started = time.monotonic()
        try:
            response = self.fetcher.fetch(settings.query)
        finally:
            logger.info(f"request complete in {time.monotonic() - request_started:.3f}s")
            self.fetcher.close()

        statuses = self.collector.collect(response)
        alert_shards = self.collector.select_alert_shards(statuses, settings.alert_threshold)

        result = AlertResult(
            shards_fetched=len(statuses),
            alert_shards=alert_shards,
            dry_run=settings.dry_run,
        )

        if not alert_shards:
            logger.info("no shard require limit increase")
            result.duration_seconds = time.monotonic() - started
            return result

        logger.info(f"shard limits alert for {format_shard_list(alert_shards)}")
        text = self.renderer.render_message(alert_shards)

        if settings.dry_run:
            logger.info(f"[DRY RUN] alert message not sent:\n{text}")
        else:
            result.notification = self.router.send_alert(text, alert_shards)

        result.duration_seconds = time.monotonic() - started
        return result
