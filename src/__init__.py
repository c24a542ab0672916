"""
Shard Limit Alert - Prometheus-driven catalog capacity notifier.

This package provides:
- Prometheus instant query client (Real/Mock providers)
- Per-shard free slot collection and threshold selection
- Telegram delivery of a fixed-width alert table
"""

__version__ = "0.1.0"
