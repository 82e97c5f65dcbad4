"""
Marker registration for the mentorship test suite.

Tests under ``unit/`` and ``integration/`` are tagged from their location;
modules that exercise the bearer-token paths are also tagged ``auth`` so
``pytest -m auth`` selects them regardless of layer.
"""

import pytest

MARKERS = {
    "unit": "isolated tests against mocks or a throwaway sqlite session",
    "integration": "tests driving the Flask app through the test client",
    "api": "HTTP endpoint tests",
    "auth": "registration, login, tokens and access rules",
    "security": "password hashing and token signing",
    "services": "service layer tests",
    "repositories": "repository tests against sqlite",
    "database": "tests that touch the database",
}

_AUTH_MODULES = ("test_auth_", "test_security")


def pytest_configure(config):
    for name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


def pytest_collection_modifyitems(config, items):
    for item in items:
        parts = item.path.parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in parts:
            item.add_marker(pytest.mark.integration)

        if item.path.name.startswith(_AUTH_MODULES):
            item.add_marker(pytest.mark.auth)
