"""
Test fixtures for Shard Limit Alert tests.
"""

import os
import pytest

# Set test environment
os.environ["PROMETHEUS_MOCK"] = "true"
os.environ["NOTIFICATION_MOCK"] = "true"


@pytest.fixture
def make_result():
    """Build raw Prometheus result entries."""
    from src.agents.shard_limit.shard_limit.services.prometheus_query_fetcher import (
        MockQueryFetcher,
    )
    return MockQueryFetcher.make_result


@pytest.fixture
def make_response():
    """Build a decoded Prometheus response from raw result entries."""
    from src.agents.shard_limit.shard_limit.services.models import PrometheusResponse

    def _create_response(results):
        return PrometheusResponse.model_validate({
            "status": "success",
            "data": {"resultType": "vector", "result": results},
        })

    return _create_response


@pytest.fixture
def make_status():
    """Create ShardStatus records."""
    from src.agents.shard_limit.shard_limit.services.models import ShardStatus

    def _create_status(shard: str = "catalog-01", free_slots: int = 100) -> ShardStatus:
        return ShardStatus(shard=shard, free_slots=free_slots)

    return _create_status


@pytest.fixture
def make_settings(monkeypatch):
    """Create settings isolated from SHARD_LIMIT_* variables of the host."""
    from src.agents.shard_limit.config import ShardLimitSettings

    for key in list(os.environ):
        if key.startswith("SHARD_LIMIT_"):
            monkeypatch.delenv(key)

    def _create_settings(**overrides) -> ShardLimitSettings:
        values = {"telegram_chat_id": 42, "alert_threshold": 1000}
        values.update(overrides)
        return ShardLimitSettings(**values)

    return _create_settings


@pytest.fixture
def collector():
    """Create a shard status collector instance."""
    from src.agents.shard_limit.shard_limit.services.shard_status_collector import (
        ShardStatusCollector,
    )
    return ShardStatusCollector()


@pytest.fixture
def renderer():
    """Create a table renderer instance."""
    from src.agents.shard_limit.shard_limit.services.table_renderer import (
        AlertTableRenderer,
    )
    return AlertTableRenderer()


@pytest.fixture
def query_fetcher():
    """Create a mock query fetcher."""
    from src.agents.shard_limit.shard_limit.services.prometheus_query_fetcher import (
        PrometheusQueryFetcher,
    )
    return PrometheusQueryFetcher(use_mock=True)


@pytest.fixture
def notification_router():
    """Create a mock notification router."""
    from src.agents.shard_limit.shard_limit.services.notification_router import (
        NotificationRouter,
    )
    return NotificationRouter(use_mock=True)
