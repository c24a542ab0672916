"""
Notification Router for Shard Limit Alerts.

Delivers the rendered alert to the configured chat channel.
- telegram: Telegram Bot API (default)
- mock: in-memory sender for tests and dry runs
"""

import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Union

from src.agents.shard_limit.shard_limit.services.exceptions import NotificationError
from src.agents.shard_limit.shard_limit.services.models import (
    NotificationResult,
    ShardStatus,
)
from src.agents.shard_limit.shard_limit.services.telegram_notifier import (
    DEFAULT_TOKEN_FILE,
    TelegramMessage,
    TelegramNotifier,
)

logger = logging.getLogger(__name__)


class NotificationChannel(str, Enum):
    """Notification channel types."""

    TELEGRAM = "telegram"
    MOCK = "mock"


class BaseNotificationSender(ABC):
    """Abstract base class for notification senders."""

    @abstractmethod
    def send(
        self,
        text: str,
        shards: List[ShardStatus],
    ) -> NotificationResult:
        """Send notification.

        Args:
            text: Rendered message
            shards: Shards listed in the message

        Returns:
            NotificationResult
        """
        pass

    def verify(self) -> None:
        """Check that the sender can deliver before any work is done."""
        pass


class TelegramNotificationSender(BaseNotificationSender):
    """Telegram notification sender."""

    def __init__(
        self,
        chat_id: Union[int, str],
        token_file: str = DEFAULT_TOKEN_FILE,
        notifier: Optional[TelegramNotifier] = None,
    ):
        """Initialize Telegram sender.

        Args:
            chat_id: Destination chat id
            token_file: Path to the bot token file
            notifier: Pre-built notifier (token file is not read when given)
        """
        self.chat_id = chat_id
        self.token_file = token_file
        self._notifier = notifier
        self._initialized = False

    def _ensure_initialized(self) -> TelegramNotifier:
        """Lazy initialize the Telegram notifier and validate its token."""
        if self._notifier is None:
            self._notifier = TelegramNotifier.from_token_file(self.token_file)
        if not self._initialized:
            self._notifier.get_me()
            self._initialized = True
        return self._notifier

    def verify(self) -> None:
        """Load the bot token and validate it with getMe."""
        self._ensure_initialized()

    def send(
        self,
        text: str,
        shards: List[ShardStatus],
    ) -> NotificationResult:
        """Send Telegram notification.

        Args:
            text: Rendered message
            shards: Shards listed in the message

        Returns:
            NotificationResult

        Raises:
            NotificationError: If the message was not delivered
        """
        notifier = self._ensure_initialized()
        notifier.send_message(TelegramMessage(chat_id=self.chat_id, text=text))

        return NotificationResult(
            success=True,
            channel=NotificationChannel.TELEGRAM.value,
            message=text,
            shard_count=len(shards),
        )


class MockNotificationSender(BaseNotificationSender):
    """Mock notification sender for testing."""

    def __init__(self):
        """Initialize mock sender."""
        self.sent_notifications: List[dict] = []

    def send(
        self,
        text: str,
        shards: List[ShardStatus],
    ) -> NotificationResult:
        """Mock send notification.

        Args:
            text: Rendered message
            shards: Shards listed in the message

        Returns:
            NotificationResult
        """
        self.sent_notifications.append({
            "text": text,
            "shards": list(shards),
        })
        logger.info(f"[MOCK] Notification sent for {len(shards)} shards")

        return NotificationResult(
            success=True,
            channel=NotificationChannel.MOCK.value,
            message=text,
            shard_count=len(shards),
        )

    def get_sent_notifications(self) -> List[dict]:
        """Get list of sent notifications."""
        return self.sent_notifications.copy()

    def clear(self) -> None:
        """Clear sent notifications."""
        self.sent_notifications.clear()


class NotificationRouter:
    """
    Routes the shard limit alert to its chat channel.

    A single message is sent per run; any delivery failure raises
    NotificationError.
    """

    def __init__(
        self,
        chat_id: Union[int, str] = 0,
        token_file: str = DEFAULT_TOKEN_FILE,
        use_mock: Optional[bool] = None,
        sender: Optional[BaseNotificationSender] = None,
    ):
        """Initialize notification router.

        Args:
            chat_id: Destination chat id
            token_file: Path to the bot token file
            use_mock: Use mock sender (auto-detect if None)
            sender: Explicit sender, overrides channel selection
        """
        if use_mock is None:
            use_mock = os.environ.get("NOTIFICATION_MOCK", "").lower() == "true"

        self.use_mock = use_mock
        if sender is not None:
            self._sender = sender
        elif use_mock:
            self._sender = MockNotificationSender()
        else:
            self._sender = TelegramNotificationSender(chat_id=chat_id, token_file=token_file)

        logger.info(
            f"NotificationRouter initialized: "
            f"sender={type(self._sender).__name__}, mock={use_mock}"
        )

    @property
    def sender(self) -> BaseNotificationSender:
        """Get underlying sender."""
        return self._sender

    def verify(self) -> None:
        """Validate channel credentials before querying metrics."""
        self._sender.verify()

    def send_alert(
        self,
        text: str,
        shards: List[ShardStatus],
    ) -> NotificationResult:
        """Send the rendered alert.

        Args:
            text: Rendered message
            shards: Shards listed in the message

        Returns:
            NotificationResult of the delivered message

        Raises:
            NotificationError: If delivery failed
        """
        if not shards:
            raise NotificationError("refusing to send an alert without shards")

        result = self._sender.send(text, shards)
        if not result.success:
            raise NotificationError(result.error or f"{result.channel} send failed")
        return result
