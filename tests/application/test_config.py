"""Tests for connection settings."""

import pytest
from pydantic import ValidationError

from tradelog.application.config import ConnectionSettings, load_settings


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        settings = load_settings({}, dotenv=False)

        assert settings == ConnectionSettings()
        assert settings.connection_timeout == 30.0
        assert settings.base_retry_delay == 3.0
        assert settings.backoff_multiplier == 1.5
        assert settings.max_retry_delay == 15.0
        assert settings.max_auto_retries == 8
        assert settings.admin_token_param == "caffeineAdminToken"

    def test_environment_overrides(self):
        env = {
            "TRADELOG_BACKEND_URL": "https://abc.icp0.io",
            "TRADELOG_CONNECTION_TIMEOUT": "5",
            "TRADELOG_MAX_AUTO_RETRIES": "2",
            "TRADELOG_ADMIN_TOKEN_PARAM": "",
            "UNRELATED": "x",
        }

        settings = load_settings(env, dotenv=False)

        assert settings.backend_url == "https://abc.icp0.io"
        assert settings.connection_timeout == 5.0
        assert settings.max_auto_retries == 2
        assert settings.admin_token_param == "caffeineAdminToken"

    def test_invalid_values_raise(self):
        with pytest.raises(ValidationError):
            load_settings({"TRADELOG_CONNECTION_TIMEOUT": "0"}, dotenv=False)
        with pytest.raises(ValidationError):
            load_settings({"TRADELOG_BACKOFF_MULTIPLIER": "0.5"}, dotenv=False)
        with pytest.raises(ValidationError):
            load_settings({"TRADELOG_MAX_AUTO_RETRIES": "many"}, dotenv=False)

    def test_settings_are_frozen(self):
        settings = ConnectionSettings()

        with pytest.raises(ValidationError):
            settings.backend_url = "http://elsewhere"  # type: ignore[misc]

        assert settings.model_copy(update={"backend_url": "http://elsewhere"}).backend_url == "http://elsewhere"
