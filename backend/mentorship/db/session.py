import logging
import os
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from mentorship.core.config import DEFAULT_DATABASE_URL

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine: Optional[Engine] = None
_SessionLocal = None
_database_url: Optional[str] = None
_configured_url: Optional[str] = None


def _mask_url_password(url: str) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except Exception:
        return "<unparseable url>"


def configure_database(database_url: str) -> None:
    """Select the database the lazy engine should point at.

    Called by the application factory; the engine itself is only built on
    first use, so tests can reconfigure before anything connects.
    """
    global _configured_url
    _configured_url = database_url


def _build_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.drivername.startswith("postgresql"):
        # Pooled configuration for production PostgreSQL
        return create_engine(
            database_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # Detects and refreshes stale connections
            pool_recycle=3600,
            connect_args={
                "application_name": "mentorship",
                "connect_timeout": 10,
            },
        )

    if url.drivername.startswith("sqlite"):
        if url.database in (None, "", ":memory:"):
            # Use a single shared in-memory database across the process so DDL
            # persists across sessions (tests create tables then open new sessions).
            engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(database_url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(database_url)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE rules unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    """Return a cached SQLAlchemy engine, creating it on first call or when
    the configured DATABASE_URL changed."""
    global _engine, _SessionLocal, _database_url
    database_url = _configured_url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        logger.info(
            "Database engine created",
            extra={
                "context": {
                    "url": _mask_url_password(database_url),
                    "dialect": _engine.dialect.name,
                }
            },
        )
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal() -> Session:
    """Return a new Session. One session is used per inbound request."""
    return get_sessionmaker()()


def create_tables() -> None:
    """Create all tables in database using the lazy engine."""
    # Ensure models are imported so Base.metadata is populated
    from mentorship.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables() -> None:
    from mentorship.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())


def check_database_connection() -> bool:
    """Round trip to the database; used by the readiness probe."""
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        return False
