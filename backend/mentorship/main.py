"""
Application factory for the mentorship backend.
"""

import logging
from typing import Optional

import click
from flask import Flask
from prometheus_client import CollectorRegistry

from mentorship.core.auth_decorators import TOKEN_MANAGER_EXTENSION
from mentorship.core.config import Settings, load_settings, log_settings
from mentorship.core.logging_config import get_logger, setup_logging
from mentorship.core.metrics import PrometheusMetricsSink
from mentorship.core.security import TokenManager
from mentorship.db.session import SessionLocal, configure_database, create_tables
from mentorship.domain.entities import LearningStatus
from mentorship.repositories import LearningRepository


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build a configured Flask application.

    Args:
        settings: Explicit configuration (tests); read from the environment
            when omitted.
    """
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["TESTING"] = settings.is_testing
    app.config["GIT_SHA"] = settings.git_sha
    # Keep DTO field order in responses
    app.json.sort_keys = False

    setup_logging(settings, app=app)
    logger = get_logger(__name__)

    # Production validation: fail fast if weak secrets are used
    settings.validate()
    log_settings(settings)

    configure_database(settings.database_url)
    if settings.auto_create_tables:
        create_tables()

    _init_sentry(settings, logger)

    # Prometheus metrics. One registry per app so repeated create_app calls
    # (tests) never collide; business series share it.
    # MUST be initialized BEFORE limiter to avoid being rate-limited
    from prometheus_flask_exporter import PrometheusMetrics

    registry = CollectorRegistry()
    metrics = PrometheusMetrics(app, registry=registry)
    metrics.info(
        "app_info",
        "Application information",
        version=settings.git_sha,
        environment=settings.env,
    )
    business_metrics = PrometheusMetricsSink(registry)
    business_metrics.track_active_learnings(_count_active_learnings)
    app.extensions["mentorship.metrics"] = business_metrics
    app.extensions[TOKEN_MANAGER_EXTENSION] = TokenManager(
        settings.jwt_secret_key, settings.token_ttl
    )
    logger.info(
        "Prometheus metrics initialized",
        extra={"context": {"metrics_endpoint": "/metrics"}},
    )

    # Initialize Flask-Limiter (rate limiting)
    from mentorship.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = settings.limiter_storage_uri
    app.config["RATELIMIT_ENABLED"] = settings.rate_limit_enabled
    limiter.init_app(app)
    limiter.enabled = settings.rate_limit_enabled
    if not settings.rate_limit_enabled:
        logger.info(
            "Rate limiting disabled", extra={"context": {"env": settings.env}}
        )

    from mentorship.core.error_handlers import register_error_handlers

    register_error_handlers(app)
    _register_blueprints(app)
    _register_cli(app)

    logger.info(
        "Application created",
        extra={"context": {"env": settings.env, "version": settings.git_sha}},
    )
    return app


def _count_active_learnings() -> int:
    db = SessionLocal()
    try:
        return LearningRepository(db).count_by_status(LearningStatus.ACTIVE)
    finally:
        db.close()


def _init_sentry(settings: Settings, logger: logging.Logger) -> None:
    """Initialize Sentry for error tracking when SENTRY_DSN is set."""
    if not settings.sentry_dsn:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": settings.env}},
        )
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.env,
        release=settings.git_sha,
        integrations=[
            FlaskIntegration(),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
        send_default_pii=False,  # Don't send PII by default
    )
    logger.info(
        "Sentry initialized",
        extra={"context": {"environment": settings.env, "release": settings.git_sha}},
    )


def _register_blueprints(app: Flask) -> None:
    from mentorship.controllers.auth_controller import auth_bp
    from mentorship.controllers.health_controller import health_bp
    from mentorship.controllers.learning_controller import learning_bp
    from mentorship.controllers.mentor_controller import mentor_bp
    from mentorship.controllers.request_controller import request_bp
    from mentorship.controllers.user_controller import user_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(request_bp)
    app.register_blueprint(mentor_bp)
    app.register_blueprint(learning_bp)
    app.register_blueprint(health_bp)


def _register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Create all database tables."""
        create_tables()
        click.echo("Database tables created.")
