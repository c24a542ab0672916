"""
Shard Limit Alert Agent.

Single-shot check that queries Prometheus for per-shard free catalog slots
and posts a Telegram alert listing the shards at or below the threshold.
"""

__version__ = "0.1.0"
