"""
Unit tests for environment-driven settings.
"""

from datetime import timedelta

import pytest

from mentorship.core.config import DEFAULT_JWT_SECRET, Settings, load_settings


@pytest.mark.unit
class TestLoadSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("APP_ENV", " Production ")
        monkeypatch.setenv("JWT_SECRET_KEY", "x" * 40)
        monkeypatch.setenv("TOKEN_TTL_HOURS", "2")
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "no")
        monkeypatch.setenv("PORT", "9000")

        settings = load_settings()

        assert settings.env == "production"
        assert settings.is_production
        assert settings.token_ttl == timedelta(hours=2)
        assert settings.rate_limit_enabled is False
        assert settings.port == 9000

    def test_invalid_integer_falls_back(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("TOKEN_TTL_HOURS", "a day")

        assert load_settings().token_ttl_hours == 24

    def test_empty_sentry_dsn_disables_sentry(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("SENTRY_DSN", "")

        assert load_settings().sentry_dsn is None


@pytest.mark.unit
@pytest.mark.security
class TestValidate:
    @pytest.mark.parametrize("secret", [DEFAULT_JWT_SECRET, "short-secret", ""])
    def test_production_requires_strong_secret(self, secret):
        with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
            Settings(env="production", jwt_secret_key=secret).validate()

    def test_production_accepts_long_secret(self):
        Settings(env="production", jwt_secret_key="s" * 32).validate()

    def test_development_allows_default_secret(self):
        Settings(env="development").validate()

    def test_token_ttl_must_be_positive(self):
        with pytest.raises(ValueError, match="TOKEN_TTL_HOURS"):
            Settings(token_ttl_hours=0).validate()
