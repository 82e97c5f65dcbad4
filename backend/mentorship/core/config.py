"""
Centralized configuration module for application-wide settings.

All settings come from environment variables (optionally loaded from a
``.env`` file) and are gathered into one ``Settings`` object that the
application factory receives. Tests build ``Settings`` directly.
"""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./mentorship.db"
DEFAULT_JWT_SECRET = "dev-jwt-secret-change-me"
WEAK_SECRETS = ("dev-jwt-secret-change-me", "dev-secret-change-me", "secret123")
MIN_PRODUCTION_SECRET_LENGTH = 32


def _env_bool(name: str, default: str) -> bool:
    """Truthy values: "true", "1", "yes" (case-insensitive)."""
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            f"Invalid integer '{raw}' for {name}. Falling back to {default}.",
            extra={"context": {"variable": name, "value": raw}},
        )
        return default


@dataclass
class Settings:
    """Deployment configuration for one application instance."""

    env: str = "development"
    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    token_ttl_hours: int = 24
    log_level: str = "INFO"
    log_json: bool = False
    log_to_file: bool = False
    rate_limit_enabled: bool = True
    limiter_storage_uri: str = "memory://"
    sentry_dsn: str | None = None
    git_sha: str = "unknown"
    auto_create_tables: bool = True
    port: int = 8080

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_testing(self) -> bool:
        return self.env == "testing"

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(hours=self.token_ttl_hours)

    def validate(self) -> None:
        """
        Fail fast on unsafe production configuration.

        Raises:
            ValueError: If production deployment uses a weak or missing JWT secret
        """
        if self.token_ttl_hours <= 0:
            raise ValueError("TOKEN_TTL_HOURS must be a positive number of hours")

        if self.is_production:
            secret = self.jwt_secret_key or ""
            if secret in WEAK_SECRETS or len(secret) < MIN_PRODUCTION_SECRET_LENGTH:
                raise ValueError(
                    "Production deployment requires strong JWT_SECRET_KEY "
                    f"(min {MIN_PRODUCTION_SECRET_LENGTH} chars). "
                    "Set JWT_SECRET_KEY environment variable."
                )


def load_settings() -> Settings:
    """
    Build settings from the environment.

    Environment Variables:
        APP_ENV: development | production | testing (default: development)
        DATABASE_URL: SQLAlchemy URL (default: local sqlite file)
        JWT_SECRET_KEY: HMAC secret used to sign access tokens
        TOKEN_TTL_HOURS: Access token lifetime in hours (default: 24)
        LOG_LEVEL, LOG_JSON, LOG_TO_FILE: Logging behaviour
        RATE_LIMIT_ENABLED, LIMITER_STORAGE_URI: Flask-Limiter settings
        SENTRY_DSN, GIT_SHA: Error tracking
        AUTO_CREATE_TABLES: Create tables at startup (default: true)
        PORT: Port for the development server (default: 8080)
    """
    # Only load from .env when DATABASE_URL is not already defined by the environment
    if not os.getenv("DATABASE_URL"):
        load_dotenv()

    return Settings(
        env=os.getenv("APP_ENV", "development").strip().lower(),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET),
        token_ttl_hours=_env_int("TOKEN_TTL_HOURS", 24),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=_env_bool("LOG_JSON", "false"),
        log_to_file=_env_bool("LOG_TO_FILE", "false"),
        rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", "true"),
        limiter_storage_uri=os.getenv("LIMITER_STORAGE_URI", "memory://"),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
        git_sha=os.getenv("GIT_SHA", "unknown"),
        auto_create_tables=_env_bool("AUTO_CREATE_TABLES", "true"),
        port=_env_int("PORT", 8080),
    )


def log_settings(settings: Settings) -> None:
    """
    Log the active configuration without exposing secrets.

    Should be called during application startup.
    """
    logger.info(
        "Configuration initialized",
        extra={
            "context": {
                "env": settings.env,
                "token_ttl_hours": settings.token_ttl_hours,
                "rate_limit_enabled": settings.rate_limit_enabled,
                "sentry_enabled": bool(settings.sentry_dsn),
                "jwt_secret_set": settings.jwt_secret_key != DEFAULT_JWT_SECRET,
            }
        },
    )
