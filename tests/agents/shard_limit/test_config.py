"""
Tests for shard limit alert settings.
"""

import pytest
from pydantic import ValidationError

from src.agents.shard_limit.shard_limit.services.exceptions import ConfigurationError


class TestShardLimitSettings:
    """Tests for ShardLimitSettings."""

    def test_defaults(self, make_settings):
        settings = make_settings(telegram_chat_id=0)

        assert settings.prometheus_url == "http://localhost:9090/"
        assert settings.query == "wbx_catalog_storage_limit-wbx_catalog_storage_size"
        assert settings.request_timeout == 2.0
        assert settings.telegram_bot_token_file == "~/.secret/telegram.bot.token"
        assert settings.telegram_chat_id == 0
        assert settings.alert_threshold == 1000
        assert settings.dry_run is False

    def test_env_override(self, make_settings, monkeypatch):
        monkeypatch.setenv("SHARD_LIMIT_PROMETHEUS_URL", "http://prom:9090")
        monkeypatch.setenv("SHARD_LIMIT_ALERT_THRESHOLD", "250")
        monkeypatch.setenv("SHARD_LIMIT_REQUEST_TIMEOUT", "0.5")

        from src.agents.shard_limit.config import ShardLimitSettings

        settings = ShardLimitSettings()

        assert settings.prometheus_url == "http://prom:9090"
        assert settings.alert_threshold == 250
        assert settings.request_timeout == 0.5

    def test_explicit_values_beat_env(self, make_settings, monkeypatch):
        monkeypatch.setenv("SHARD_LIMIT_ALERT_THRESHOLD", "250")

        settings = make_settings(alert_threshold=10)

        assert settings.alert_threshold == 10

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_timeout_must_be_positive(self, make_settings, timeout):
        with pytest.raises(ValidationError):
            make_settings(request_timeout=timeout)

    def test_negative_chat_id_allowed(self, make_settings):
        settings = make_settings(telegram_chat_id=-1001234567890)

        settings.validate_required()

    def test_missing_chat_id(self, make_settings):
        settings = make_settings(telegram_chat_id=0)

        with pytest.raises(ConfigurationError, match="@RawDataBot"):
            settings.validate_required()

    def test_missing_chat_id_allowed_in_dry_run(self, make_settings):
        make_settings(telegram_chat_id=0, dry_run=True).validate_required()

    def test_log_level_normalized(self, make_settings):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, make_settings):
        with pytest.raises(ValidationError, match="log_level"):
            make_settings(log_level="VERBOSE")

    def test_to_log_dict(self, make_settings):
        data = make_settings().to_log_dict()

        assert data["telegram_chat_id"] == 42
        assert data["alert_threshold"] == 1000
