"""
Flask application fixtures for integration testing.

``app`` is built from explicit ``Settings`` (no environment lookups) on a
fresh in-memory database. Helpers register and log in users and return
ready-to-use Authorization headers.
"""

import pytest

from mentorship.core.config import Settings
from mentorship.main import create_app
from tests.fixtures.database_fixtures import TEST_DATABASE_URL, reset_database

TEST_JWT_SECRET = "test-jwt-secret-key-with-enough-length-0123456789"
DEFAULT_PASSWORD = "password123"


def build_test_settings(**overrides) -> Settings:
    values = dict(
        env="testing",
        database_url=TEST_DATABASE_URL,
        jwt_secret_key=TEST_JWT_SECRET,
        token_ttl_hours=1,
        log_level="WARNING",
        rate_limit_enabled=False,
        auto_create_tables=True,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def app():
    """Create a Flask application configured for testing."""
    application = create_app(build_test_settings())
    reset_database()
    yield application


@pytest.fixture
def client(app):
    return app.test_client()


class ApiHelper:
    """Small wrapper around the test client for common flows."""

    def __init__(self, client):
        self.client = client

    def register(self, email, name="Test User", password=DEFAULT_PASSWORD, role=None, **extra):
        body = {"name": name, "email": email, "password": password}
        if role is not None:
            body["role"] = role
        body.update(extra)
        return self.client.post("/api/auth/register", json=body)

    def login(self, email, password=DEFAULT_PASSWORD):
        return self.client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )

    def auth_headers(self, email, name="Test User", role=None):
        """Register (if needed) and log in; return bearer headers."""
        self.register(email, name=name, role=role)
        response = self.login(email)
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    def create_mentor(self, admin_headers, name="Mentor One", email="mentor@corp.com"):
        response = self.client.post(
            "/api/mentors",
            json={
                "name": name,
                "jobTitle": "Senior Engineer",
                "email": email,
                "experience": "10 years",
                "telegram": "@mentor",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    def create_request(self, headers, topic="Go", description="basics"):
        response = self.client.post(
            "/api/requests",
            json={"topic": topic, "description": description},
            headers=headers,
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()


@pytest.fixture
def api(client):
    return ApiHelper(client)


@pytest.fixture
def admin_headers(api):
    return api.auth_headers("admin@corp.com", name="Admin", role="admin")


@pytest.fixture
def employee_headers(api):
    return api.auth_headers("alice@corp.com", name="Alice")
