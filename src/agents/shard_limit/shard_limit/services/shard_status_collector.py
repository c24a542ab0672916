"""
Shard Status Collector.

Turns a decoded Prometheus response into per-shard capacity records,
keeps the lowest observation per shard and selects the shards that need a
limit increase.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from src.agents.shard_limit.shard_limit.services.exceptions import MalformedValueError
from src.agents.shard_limit.shard_limit.services.models import (
    CATEGORY_SHARD_TYPE,
    PrometheusResponse,
    PrometheusResult,
    ShardStatus,
)

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def parse_free_slots(shard: str, raw: Any) -> int:
    """Parse a sample value into an integer slot count.

    Prometheus encodes sample values as strings; integers and integral
    floats are accepted as well.

    Args:
        shard: Shard name, used in error messages
        raw: Second element of the result value pair

    Returns:
        Free slot count

    Raises:
        MalformedValueError: If the value is not an integer
    """
    if isinstance(raw, bool):
        raise MalformedValueError(f"value type invalid {type(raw).__name__} for shard {shard}")
    if isinstance(raw, str):
        if not _INTEGER_RE.fullmatch(raw):
            raise MalformedValueError(f"invalid value for shard {shard}: {raw!r}")
        try:
            value = int(raw)
        except ValueError as e:
            raise MalformedValueError(f"value out of range for shard {shard}: {raw[:32]!r}...") from e
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise MalformedValueError(f"value out of range for shard {shard}: {raw[:32]!r}")
        return value
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    raise MalformedValueError(f"value type invalid {type(raw).__name__} for shard {shard}: {raw!r}")


def parse_sample_time(shard: str, raw: Any) -> datetime:
    """Convert a Unix timestamp with fractional seconds into a UTC datetime.

    Args:
        shard: Shard name, used in error messages
        raw: First element of the result value pair

    Returns:
        Timezone-aware datetime

    Raises:
        MalformedValueError: If the timestamp is not a number or out of range
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise MalformedValueError(f"time type invalid {type(raw).__name__} for shard {shard}")
    try:
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedValueError(f"time out of range for shard {shard}: {raw!r}") from e


def format_shard_list(statuses: Iterable[ShardStatus]) -> str:
    """Render shard names as a compact list, e.g. ``[a,b,c]``."""
    return "[" + ",".join(s.shard for s in statuses) + "]"


class ShardStatusCollector:
    """
    Builds ShardStatus records from query results.

    Features:
    - shard_type filtering (only category shards by default)
    - value and timestamp parsing with strict type checks
    - per-shard deduplication keeping the minimum free slot count
    - threshold selection sorted by remaining capacity
    """

    def __init__(self, shard_type: str = CATEGORY_SHARD_TYPE):
        """Initialize collector.

        Args:
            shard_type: Value of the shard_type label to keep
        """
        self.shard_type = shard_type

    def to_status(self, result: PrometheusResult) -> ShardStatus:
        """Convert one result entry into a ShardStatus.

        Args:
            result: Decoded result entry

        Returns:
            ShardStatus

        Raises:
            MalformedValueError: If the value pair is malformed
        """
        shard = result.metric.shard
        if len(result.value) != 2:
            raise MalformedValueError(
                f"value for shard {shard} must be a [timestamp, value] pair, "
                f"got {len(result.value)} elements"
            )

        free_slots = parse_free_slots(shard, result.value[1])
        sample_time = parse_sample_time(shard, result.value[0])
        return ShardStatus(shard=shard, free_slots=free_slots, time=sample_time)

    def collect(self, response: PrometheusResponse) -> List[ShardStatus]:
        """Collect one status per shard from a query response.

        Args:
            response: Decoded Prometheus response

        Returns:
            One ShardStatus per shard name, holding its lowest free slot count
        """
        by_shard: Dict[str, ShardStatus] = {}
        skipped = 0

        for result in response.data.result:
            if result.metric.shard_type != self.shard_type:
                skipped += 1
                continue

            status = self.to_status(result)
            existing = by_shard.get(status.shard)
            if existing is None or existing.free_slots > status.free_slots:
                by_shard[status.shard] = status

        if skipped:
            logger.debug(f"Skipped {skipped} results with shard_type != {self.shard_type}")
        logger.info(
            f"Collected {len(by_shard)} shards from {len(response.data.result)} results"
        )
        return list(by_shard.values())

    def select_alert_shards(
        self,
        statuses: List[ShardStatus],
        threshold: int,
    ) -> List[ShardStatus]:
        """Select shards at or below the threshold, lowest capacity first.

        Args:
            statuses: Collected shard statuses
            threshold: Alert threshold (inclusive)

        Returns:
            Sorted list of alerting shards
        """
        alerting = [s for s in statuses if s.free_slots <= threshold]
        return sorted(alerting, key=lambda s: (s.free_slots, s.shard))


_default_collector: Optional[ShardStatusCollector] = None


def get_shard_status_collector() -> ShardStatusCollector:
    """Get or create the default collector."""
    global _default_collector
    if _default_collector is None:
        _default_collector = ShardStatusCollector()
    return _default_collector
