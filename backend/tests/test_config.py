"""
Gist Relay — Settings Tests
============================

What:  Tests for environment-driven configuration and its validation.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from gist_relay.config import Settings


class TestGitHubToken:

    def test_token_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_from_env")

        settings = Settings(_env_file=None)

        assert settings.github_token == "ghp_from_env"
        assert settings.gist_sharing_configured

    def test_blank_token_counts_as_missing(self):
        settings = Settings(_env_file=None, github_token="   ")

        assert settings.github_token is None
        assert not settings.gist_sharing_configured

    def test_missing_token_fails_startup_validation(self):
        settings = Settings(_env_file=None, github_token=None)

        with pytest.raises(ValueError, match="GITHUB_TOKEN"):
            settings.validate_required_for_production()

    def test_configured_token_passes_startup_validation(self, test_settings):
        test_settings.validate_required_for_production()


class TestServerSettings:

    def test_defaults_match_dev_proxy(self):
        settings = Settings(_env_file=None)

        assert settings.backend_port == 3030
        assert settings.github_api_url == "https://api.github.com"
        assert settings.gist_raw_base_url == "https://gist.githubusercontent.com"

    def test_log_level_is_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_cors_origins_list(self):
        settings = Settings(
            _env_file=None, cors_origins="http://localhost:5173, https://percival.ink,"
        )

        assert settings.cors_origins_list == ["http://localhost:5173", "https://percival.ink"]

    def test_timeout_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, gist_timeout_seconds=0)
