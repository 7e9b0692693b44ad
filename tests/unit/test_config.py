"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from grout.config import Settings, get_settings, settings


class TestSettings:
    """Test settings defaults and validation."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GROUT_LOG_LEVEL", raising=False)
        config = Settings()

        assert config.port == 8080
        assert config.cache_size == 2000
        assert config.rate_limit_enabled is True
        assert config.rate_limit_rpm == 100
        assert config.rate_limit_burst == 10
        assert config.rate_limit_cleanup_interval == 600
        assert config.rate_limit_idle_timeout == 600
        assert config.min_width_for_quote == 300
        assert config.min_font_size == 16
        assert config.max_font_size == 48
        assert config.min_chars_per_line == 10

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("GROUT_CACHE_SIZE", "5")
        monkeypatch.setenv("GROUT_RATE_LIMIT_ENABLED", "false")

        config = Settings()

        assert config.cache_size == 5
        assert config.rate_limit_enabled is False

    @pytest.mark.parametrize("field", ["cache_size", "rate_limit_rpm", "rate_limit_burst", "min_font_size"])
    def test_rejects_non_positive_values(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_get_settings_returns_singleton(self):
        assert get_settings() is settings
