"""
Prometheus Query Fetcher.

Runs a single instant query against the Prometheus HTTP API and decodes the
response into typed models.
"""

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from src.agents.shard_limit.shard_limit.services.exceptions import (
    MetricsRequestError,
    MetricsResponseError,
)
from src.agents.shard_limit.shard_limit.services.models import (
    CATEGORY_SHARD_TYPE,
    PrometheusResponse,
)

logger = logging.getLogger(__name__)

QUERY_ENDPOINT = "/api/v1/query"
DEFAULT_PROMETHEUS_URL = "http://localhost:9090/"


class BaseQueryFetcher(ABC):
    """Abstract base class for query fetchers."""

    @abstractmethod
    def fetch(self, query: str) -> PrometheusResponse:
        """Run an instant query.

        Args:
            query: PromQL expression

        Returns:
            Decoded PrometheusResponse with status "success"
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass


def decode_response(body: Any) -> PrometheusResponse:
    """Validate a decoded JSON body and reject failed queries.

    Args:
        body: JSON-decoded response body

    Returns:
        PrometheusResponse

    Raises:
        MetricsResponseError: If the body has an unexpected shape or
            Prometheus reports status "error"
    """
    try:
        response = PrometheusResponse.model_validate(body)
    except ValidationError as e:
        raise MetricsResponseError(f"response JSON unmarshal: {e}") from e

    if response.is_error:
        raise MetricsResponseError(
            f"prometheus response error: type: {response.error_type}; "
            f"msg: {response.error}"
        )

    for warning in response.warnings:
        logger.warning(f"Prometheus warning: {warning}")

    return response


class RealQueryFetcher(BaseQueryFetcher):
    """Prometheus HTTP API fetcher."""

    def __init__(
        self,
        prometheus_url: str = DEFAULT_PROMETHEUS_URL,
        timeout: float = 2.0,
    ):
        """Initialize real query fetcher.

        Args:
            prometheus_url: Prometheus base URL with scheme, host and port
            timeout: Request timeout in seconds
        """
        self.prometheus_url = prometheus_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Get or create requests session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def query_url(self) -> str:
        """Full URL of the instant query endpoint."""
        return f"{self.prometheus_url}{QUERY_ENDPOINT}"

    def fetch(self, query: str) -> PrometheusResponse:
        """Run an instant query against Prometheus.

        Args:
            query: PromQL expression

        Returns:
            Decoded PrometheusResponse

        Raises:
            MetricsRequestError: On transport errors, timeouts or non-200 status
            MetricsResponseError: On undecodable or failed responses
        """
        session = self._get_session()
        url = self.query_url

        try:
            response = session.get(url, params={"query": query}, timeout=self.timeout)
        except requests.Timeout as e:
            raise MetricsRequestError(
                f"prometheus/query request timed out after {self.timeout}s: {e}"
            ) from e
        except requests.RequestException as e:
            raise MetricsRequestError(f"prometheus/query request error: {e}") from e

        if response.status_code != requests.codes.ok:
            raise MetricsRequestError(
                f"req {url}?query={query} status code: {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MetricsResponseError(f"response JSON unmarshal: {e}") from e

        return decode_response(body)

    def close(self) -> None:
        """Close the underlying session."""
        if self._session is not None:
            self._session.close()
            self._session = None


class MockQueryFetcher(BaseQueryFetcher):
    """Mock query fetcher for testing."""

    def __init__(self):
        """Initialize mock query fetcher."""
        self._mock_results: List[Dict[str, Any]] = []
        self.queries: List[str] = []
        self._setup_default_results()

    def _setup_default_results(self) -> None:
        """Setup default mock results."""
        self._mock_results = [
            self.make_result("catalog-01", 250),
            self.make_result("catalog-02", 4800),
            self.make_result("catalog-03", 900),
            self.make_result("catalog-03", 1200),
            self.make_result("search-01", 10, shard_type="search"),
        ]

    @staticmethod
    def make_result(
        shard: str,
        free_slots: Any,
        shard_type: str = CATEGORY_SHARD_TYPE,
        timestamp: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Build one raw result entry in Prometheus wire format.

        Args:
            shard: Shard name
            free_slots: Sample value, stringified unless already a string
            shard_type: shard_type label
            timestamp: Unix seconds (defaults to now)

        Returns:
            Result dictionary
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc).timestamp()
        value = free_slots if isinstance(free_slots, str) else str(free_slots)
        return {
            "metric": {
                "__name__": "wbx_catalog_storage_free",
                "shard": shard,
                "shard_type": shard_type,
            },
            "value": [timestamp, value],
        }

    def fetch(self, query: str) -> PrometheusResponse:
        """Return mock query results.

        Args:
            query: PromQL expression (recorded only)

        Returns:
            Decoded PrometheusResponse
        """
        self.queries.append(query)
        logger.info(f"[MOCK] Returning {len(self._mock_results)} mock results")
        return decode_response({
            "status": "success",
            "data": {"resultType": "vector", "result": list(self._mock_results)},
        })

    def inject_result(self, result: Dict[str, Any]) -> None:
        """Inject a raw result entry for testing.

        Args:
            result: Result dictionary in wire format
        """
        self._mock_results.append(result)
        logger.info(f"[MOCK] Injected result: {result.get('metric', {}).get('shard')}")

    def clear_results(self) -> None:
        """Clear all mock results."""
        self._mock_results.clear()
        logger.info("[MOCK] Cleared all mock results")

    def reset_to_defaults(self) -> None:
        """Reset to default mock results."""
        self._mock_results.clear()
        self._setup_default_results()
        logger.info("[MOCK] Reset to default mock results")


class PrometheusQueryFetcher:
    """Query fetcher with automatic provider selection."""

    def __init__(
        self,
        prometheus_url: str = DEFAULT_PROMETHEUS_URL,
        request_timeout: float = 2.0,
        use_mock: Optional[bool] = None,
    ):
        """Initialize query fetcher.

        Args:
            prometheus_url: Prometheus URL (for real provider)
            request_timeout: Request timeout in seconds
            use_mock: Force mock mode (auto-detect if None)
        """
        if use_mock is None:
            use_mock = os.environ.get("PROMETHEUS_MOCK", "").lower() == "true"

        if use_mock:
            self._provider: BaseQueryFetcher = MockQueryFetcher()
            logger.info("Using Mock Query Fetcher")
        else:
            self._provider = RealQueryFetcher(
                prometheus_url=prometheus_url,
                timeout=request_timeout,
            )
            logger.info(f"Using Real Query Fetcher: {prometheus_url}")

        self._is_mock = use_mock

    @property
    def is_mock(self) -> bool:
        """Check if using mock provider."""
        return self._is_mock

    @property
    def provider(self) -> BaseQueryFetcher:
        """Get underlying provider."""
        return self._provider

    def fetch(self, query: str) -> PrometheusResponse:
        """Run an instant query.

        Args:
            query: PromQL expression

        Returns:
            Decoded PrometheusResponse
        """
        return self._provider.fetch(query)

    def close(self) -> None:
        """Release provider resources."""
        self._provider.close()
