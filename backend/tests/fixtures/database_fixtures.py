"""
Database fixtures: a clean in-memory SQLite schema per test.
"""

import pytest

from mentorship.db.session import (
    SessionLocal,
    configure_database,
    create_tables,
    drop_tables,
)

TEST_DATABASE_URL = "sqlite:///:memory:"


def reset_database() -> None:
    configure_database(TEST_DATABASE_URL)
    drop_tables()
    create_tables()


@pytest.fixture
def db_session():
    """A session on an empty schema; closed after the test."""
    reset_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
