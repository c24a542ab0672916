"""
Tests for shard limit notification routing.
"""

from unittest.mock import MagicMock

import pytest

from src.agents.shard_limit.shard_limit.services.exceptions import (
    NotificationError,
    TokenFileError,
)
from src.agents.shard_limit.shard_limit.services.models import NotificationResult
from src.agents.shard_limit.shard_limit.services.notification_router import (
    BaseNotificationSender,
    MockNotificationSender,
    NotificationChannel,
    NotificationRouter,
    TelegramNotificationSender,
)
from src.agents.shard_limit.shard_limit.services.telegram_notifier import TelegramMessage


class TestMockNotificationSender:
    """Tests for MockNotificationSender."""

    def test_send_records_notification(self, make_status):
        sender = MockNotificationSender()
        shards = [make_status("a", 10)]

        result = sender.send("alert text", shards)

        assert result.success
        assert result.channel == NotificationChannel.MOCK.value
        assert result.shard_count == 1
        sent = sender.get_sent_notifications()
        assert sent[0]["text"] == "alert text"
        assert sent[0]["shards"] == shards

    def test_clear(self, make_status):
        sender = MockNotificationSender()
        sender.send("x", [make_status()])

        sender.clear()

        assert sender.get_sent_notifications() == []


class TestTelegramNotificationSender:
    """Tests for TelegramNotificationSender."""

    def test_verify_calls_get_me_once(self):
        notifier = MagicMock()
        sender = TelegramNotificationSender(chat_id=-100123, notifier=notifier)

        sender.verify()
        sender.verify()

        notifier.get_me.assert_called_once()

    def test_send_message(self, make_status):
        notifier = MagicMock()
        sender = TelegramNotificationSender(chat_id=-100123, notifier=notifier)

        result = sender.send("alert text", [make_status("a", 1), make_status("b", 2)])

        notifier.get_me.assert_called_once()
        notifier.send_message.assert_called_once_with(
            TelegramMessage(chat_id=-100123, text="alert text")
        )
        assert result.success
        assert result.channel == "telegram"
        assert result.shard_count == 2

    def test_send_failure_propagates(self, make_status):
        notifier = MagicMock()
        notifier.send_message.side_effect = NotificationError("chat not found")
        sender = TelegramNotificationSender(chat_id=1, notifier=notifier)

        with pytest.raises(NotificationError, match="chat not found"):
            sender.send("x", [make_status()])

    def test_token_file_loaded_on_verify(self, tmp_path):
        sender = TelegramNotificationSender(
            chat_id=1,
            token_file=str(tmp_path / "missing.token"),
        )

        with pytest.raises(TokenFileError):
            sender.verify()


class TestNotificationRouter:
    """Tests for NotificationRouter."""

    def test_mock_router(self, notification_router, make_status):
        shards = [make_status("a", 10)]

        result = notification_router.send_alert("alert", shards)

        assert result.success
        assert isinstance(notification_router.sender, MockNotificationSender)
        assert len(notification_router.sender.get_sent_notifications()) == 1

    def test_telegram_selected_when_not_mock(self):
        router = NotificationRouter(chat_id=42, token_file="/nonexistent", use_mock=False)

        assert isinstance(router.sender, TelegramNotificationSender)
        assert router.sender.chat_id == 42

    def test_env_auto_detect(self, monkeypatch):
        monkeypatch.setenv("NOTIFICATION_MOCK", "true")

        assert isinstance(NotificationRouter().sender, MockNotificationSender)

    def test_empty_shards_rejected(self, notification_router):
        with pytest.raises(NotificationError):
            notification_router.send_alert("alert", [])

        assert notification_router.sender.get_sent_notifications() == []

    def test_unsuccessful_result_raises(self, make_status):
        sender = MagicMock(spec=BaseNotificationSender)
        sender.send.return_value = NotificationResult(
            success=False, channel="telegram", error="rate limited"
        )
        router = NotificationRouter(sender=sender)

        with pytest.raises(NotificationError, match="rate limited"):
            router.send_alert("alert", [make_status()])

    def test_verify_delegates(self):
        sender = MagicMock(spec=BaseNotificationSender)
        router = NotificationRouter(sender=sender)

        router.verify()

        sender.verify.assert_called_once()
