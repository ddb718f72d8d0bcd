"""
Unit tests for configuration helpers.
"""

import pytest

from ptmate.config.settings import DEVELOPMENT_JWT_SECRET, Settings


def make_settings(**overrides) -> Settings:
    # _env_file=None keeps a developer's .env out of the tests
    return Settings(_env_file=None, **overrides)


class TestSettings:

    def test_development_falls_back_to_fixed_secret(self):
        settings = make_settings(environment="development", jwt_secret="")
        assert settings.token_secret == DEVELOPMENT_JWT_SECRET
        assert settings.validate_required_fields() == []

    def test_production_requires_jwt_secret(self):
        settings = make_settings(environment="production", jwt_secret="")

        assert "JWT_SECRET" in settings.validate_required_fields()
        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            settings.token_secret

    def test_configured_secret_wins(self):
        settings = make_settings(environment="production", jwt_secret="s3cret")
        assert settings.token_secret == "s3cret"
        assert settings.validate_required_fields() == []

    def test_cors_origins_are_split_and_trimmed(self):
        settings = make_settings(cors_origins="https://a.example, https://b.example ,")
        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_cors_wildcard(self):
        assert make_settings(cors_origins="*").cors_origins_list == ["*"]

    def test_r2_endpoint_is_built_from_account_id(self):
        settings = make_settings(r2_account_id="abc123")
        assert settings.r2_endpoint == "https://abc123.r2.cloudflarestorage.com"

    def test_explicit_r2_endpoint_wins(self):
        settings = make_settings(r2_account_id="abc123", r2_endpoint_url="https://s3.example")
        assert settings.r2_endpoint == "https://s3.example"

    def test_r2_needs_all_credentials(self):
        assert not make_settings(r2_account_id="abc").r2_configured
        assert make_settings(
            r2_account_id="abc",
            r2_access_key_id="key",
            r2_secret_access_key="secret",
        ).r2_configured

    def test_upload_limit_in_bytes(self):
        assert make_settings(max_upload_size_mb=2).max_upload_bytes == 2 * 1024 * 1024

    def test_defaults(self):
        settings = make_settings()
        assert settings.api_prefix == "/api/v1"
        assert settings.timezone == "Europe/Istanbul"
        assert settings.token_ttl_days == 7
        assert settings.max_photos_per_upload == 5
