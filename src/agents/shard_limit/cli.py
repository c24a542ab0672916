"""
Shard Limit Alert command line entry point.

Usage:
    shard-limit-alert --telegram-chat-id -1001234567890
    python -m src.agents.shard_limit --alert-threshold 500 --dry-run
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from src.agents.shard_limit.config import LOG_LEVELS, ShardLimitSettings
from src.agents.shard_limit.handler import ShardLimitHandler
from src.agents.shard_limit.shard_limit.services.exceptions import (
    ConfigurationError,
    ShardLimitError,
)

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the run."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def build_parser(defaults: ShardLimitSettings) -> argparse.ArgumentParser:
    """Build the argument parser with defaults taken from settings."""
    parser = argparse.ArgumentParser(
        prog="shard-limit-alert",
        description="Alert a Telegram chat about catalog shards running out of free slots",
    )
    parser.add_argument(
        "--prometheus-url",
        default=defaults.prometheus_url,
        help="prometheus server address with scheme, address and port",
    )
    parser.add_argument(
        "--query",
        default=defaults.query,
        help="metric name used as query API param",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=defaults.request_timeout,
        help="request timeout for prometheus API, seconds",
    )
    parser.add_argument(
        "--telegram-bot-token-file",
        default=defaults.telegram_bot_token_file,
        help="path to file with telegram bot token (talk to @BotFather to get one)",
    )
    parser.add_argument(
        "--telegram-chat-id",
        type=int,
        default=defaults.telegram_chat_id,
        help="telegram chat id to report alerts to",
    )
    parser.add_argument(
        "--alert-threshold",
        type=int,
        default=defaults.alert_threshold,
        help="send alert if there is at least one shard with free product slots at or below this value",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=defaults.dry_run,
        help="log the alert message instead of sending it",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help="logging level",
    )
    return parser


def parse_settings(argv: Optional[List[str]] = None) -> ShardLimitSettings:
    """Merge environment settings with command line flags.

    Raises:
        ConfigurationError: If any option fails validation
    """
    try:
        defaults = ShardLimitSettings()
    except ValidationError as e:
        raise ConfigurationError(f"invalid environment configuration: {e}") from e

    args = build_parser(defaults).parse_args(argv)

    try:
        return ShardLimitSettings(**vars(args))
    except ValidationError as e:
        raise ConfigurationError(f"invalid command line options: {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    """Run one check and return the process exit code."""
    try:
        settings = parse_settings(argv)
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    setup_logging(settings.log_level)
    try:
        logger.info(f"OPTS {settings.to_log_dict()}")
        result = ShardLimitHandler(settings=settings).run()
    except ShardLimitError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    logger.info(f"run complete: {result.to_dict()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
