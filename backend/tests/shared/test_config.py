"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "Citizone API"
        assert settings.debug is False
        assert settings.port == 5000
        assert settings.host == "0.0.0.0"
        assert settings.api_prefix == "/v1/api"
        assert settings.access_token_ttl_seconds == 3600
        assert settings.otp_ttl_seconds == 300
        assert settings.bcrypt_rounds == 12

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_token_settings_from_env(self):
        """Settings should load JWT configuration from environment variables."""
        with patch.dict(os.environ, {
            "JWT_SECRET": "env-secret",
            "ACCESS_TOKEN_TTL_SECONDS": "600",
        }):
            settings = Settings(_env_file=None)
            assert settings.jwt_secret == "env-secret"
            assert settings.access_token_ttl_seconds == 600

    def test_loads_twilio_config_from_env(self):
        """Settings should load Twilio configuration from environment variables."""
        with patch.dict(os.environ, {
            "TWILIO_ACCOUNT_SID": "AC123",
            "TWILIO_AUTH_TOKEN": "twilio-token",
            "TWILIO_FROM_NUMBER": "+15550000000",
        }):
            settings = Settings(_env_file=None)
            assert settings.twilio_account_sid == "AC123"
            assert settings.twilio_auth_token == "twilio-token"
            assert settings.twilio_from_number == "+15550000000"


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
