"""
Shard Limit Alert Errors.

Every failure of a run is terminal; the CLI maps any ShardLimitError to a
fatal log line and a non-zero exit code.
"""


class ShardLimitError(Exception):
    """Base class for all shard limit alert failures."""
    pass


class ConfigurationError(ShardLimitError):
    """Raised when required configuration is missing or invalid."""
    pass


class TokenFileError(ShardLimitError):
    """Raised when the bot token file cannot be resolved or read."""
    pass


class MetricsRequestError(ShardLimitError):
    """Raised when the Prometheus query request fails or times out."""
    pass


class MetricsResponseError(ShardLimitError):
    """Raised when the Prometheus response cannot be decoded or reports an error."""
    pass


class MalformedValueError(MetricsResponseError):
    """Raised when a result value or timestamp has an unexpected type."""
    pass


class NotificationError(ShardLimitError):
    """Raised when the alert message cannot be delivered."""
    pass
