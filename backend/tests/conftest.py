"""
Central pytest configuration for the mentorship backend tests.

Provides the markers, the test settings and the shared fixtures for both
unit and integration tests.
"""

import os

# Set early so nothing at import time picks up a developer .env database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("APP_ENV", "testing")

from tests.config.markers import pytest_collection_modifyitems, pytest_configure  # noqa: E402,F401
from tests.fixtures.app_fixtures import *  # noqa: E402,F401,F403
from tests.fixtures.database_fixtures import *  # noqa: E402,F401,F403
