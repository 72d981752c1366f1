"""
Unit Tests for Settings and Logging Helpers
"""

import logging

import pytest
from pydantic import ValidationError

from gaterelay.core.config import Environment, Settings
from gaterelay.core.logging import SecretFilter


class TestSettings:
    """Tests for the relay settings."""

    def test_defaults(self, monkeypatch):
        for name in ("SLACK_TOKEN", "API_TOKEN", "PORT", "GATE_CONFIRM_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.PORT == 3000
        assert settings.SLACK_TOKEN == ""
        assert settings.API_TOKEN == ""
        assert settings.GATE_CONFIRM_TIMEOUT_SECONDS == 5.0
        assert settings.GATE_TIMEOUT_SCOPED is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SLACK_TOKEN", "from-env")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.SLACK_TOKEN == "from-env"
        assert settings.PORT == 8080
        assert settings.ENVIRONMENT == Environment.PRODUCTION
        assert settings.is_production

    @pytest.mark.parametrize("value", [0, -1.5])
    def test_timeout_must_be_positive(self, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, GATE_CONFIRM_TIMEOUT_SECONDS=value)

    def test_invalid_command_pattern(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, GATE_COMMAND_PATTERN="(open")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_FORMAT="xml")

    @pytest.mark.parametrize(
        "command, matches",
        [
            ("/gate", True),
            ("/opengate", True),
            ("/Open-Gate", True),
            ("/GATE", True),
            ("/weather", False),
            ("/open", False),
        ],
    )
    def test_command_regex(self, command, matches):
        regex = Settings(_env_file=None).command_regex

        assert bool(regex.search(command)) is matches


class TestSecretFilter:
    """Tests for log redaction."""

    def _record(self, msg, *args):
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)

    def test_redacts_configured_secret(self):
        log_filter = SecretFilter(secrets=["super-secret-value"])
        record = self._record("payload contained super-secret-value")

        assert log_filter.filter(record) is True
        assert "super-secret-value" not in record.msg

    def test_redacts_token_pairs(self):
        log_filter = SecretFilter()
        record = self._record("body: %s", "token=abc123&command=/gate")

        log_filter.filter(record)

        assert "abc123" not in record.args[0]
        assert "command=/gate" in record.args[0]

    def test_ignores_empty_secrets(self):
        log_filter = SecretFilter(secrets=["", "abcd1234"])

        assert log_filter.secrets == ["abcd1234"]
