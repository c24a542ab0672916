"""
Shard Limit Alert Data Models.

Pydantic models for the Prometheus instant-query response and the per-shard
capacity records derived from it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Only shards of this type carry catalog limits.
CATEGORY_SHARD_TYPE = "category"


class PrometheusResultMetric(BaseModel):
    """Label set of a single query result."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field("", alias="__name__")
    shard: str = ""
    shard_type: str = ""


class PrometheusResult(BaseModel):
    """Single instant vector sample: labels plus a [timestamp, value] pair."""

    model_config = ConfigDict(extra="ignore")

    metric: PrometheusResultMetric = Field(default_factory=PrometheusResultMetric)
    value: List[Any] = Field(default_factory=list)

    @field_validator("metric", mode="before")
    @classmethod
    def _null_metric(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("value", mode="before")
    @classmethod
    def _null_value(cls, v: Any) -> Any:
        return [] if v is None else v


class PrometheusData(BaseModel):
    """The `data` envelope of a query response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    result_type: str = Field("", alias="resultType")
    result: List[PrometheusResult] = Field(default_factory=list)

    @field_validator("result", mode="before")
    @classmethod
    def _null_result(cls, v: Any) -> Any:
        return [] if v is None else v


class PrometheusResponse(BaseModel):
    """Prometheus HTTP API response for /api/v1/query."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: str = ""
    data: PrometheusData = Field(default_factory=PrometheusData)
    error_type: str = Field("", alias="errorType")
    error: str = ""
    warnings: List[str] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _null_data(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("warnings", mode="before")
    @classmethod
    def _null_warnings(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def is_error(self) -> bool:
        """Check if Prometheus reported a failed query."""
        return self.status == "error"


class ShardStatus(BaseModel):
    """Free capacity of one shard at one observation time."""

    shard: str
    free_slots: int
    time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"{self.shard}:{self.free_slots}"


@dataclass
class NotificationResult:
    """Result of notification attempt."""

    success: bool
    channel: str  # "telegram", "mock"
    message: Optional[str] = None
    error: Optional[str] = None
    shard_count: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "channel": self.channel,
            "message": self.message,
            "error": self.error,
            "shard_count": self.shard_count,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class AlertResult:
    """Outcome of one shard limit check."""

    shards_fetched: int
    alert_shards: List[ShardStatus] = field(default_factory=list)
    notification: Optional[NotificationResult] = None
    dry_run: bool = False
    duration_seconds: float = 0.0

    @property
    def shards_alerting(self) -> int:
        """Number of shards at or below the threshold."""
        return len(self.alert_shards)

    @property
    def message_sent(self) -> bool:
        """Check if an alert message was delivered."""
        return self.notification is not None and self.notification.success

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "shards_fetched": self.shards_fetched,
            "shards_alerting": self.shards_alerting,
            "alert_shards": [
                {"shard": s.shard, "free_slots": s.free_slots, "time": s.time.isoformat()}
                for s in self.alert_shards
            ],
            "message_sent": self.message_sent,
            "dry_run": self.dry_run,
            "duration_seconds": round(self.duration_seconds, 3),
            "notification": self.notification.to_dict() if self.notification else None,
        }
