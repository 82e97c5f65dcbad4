"""
Unit tests for AuthService: registration rules, login and token validation.
"""

from datetime import timedelta

import pytest

from mentorship.core.exceptions import (
    InvalidCredentialsError,
    InvalidInputError,
    InvalidTokenError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)
from mentorship.core.security import TokenManager, hash_password
from mentorship.domain.entities import User as DomainUser
from mentorship.services.auth_service import AuthService
from tests.factories.repository_factories import UserRepositoryFactory

SECRET = "unit-test-secret-with-plenty-of-characters"


@pytest.fixture
def mock_repo():
    return UserRepositoryFactory.create_mock_full()


@pytest.fixture
def tokens():
    return TokenManager(SECRET, timedelta(hours=1))


@pytest.fixture
def service(mock_repo, tokens):
    return AuthService(mock_repo, tokens)


def stored_user(email="alice@corp.com", password="password123", role="employee"):
    return DomainUser(
        id=7,
        name="Alice",
        email=email,
        password_hash=hash_password(password),
        role=role,
    )


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.auth
class TestRegister:
    def test_register_hashes_password_and_normalizes_email(self, service, mock_repo):
        user = service.register("Alice", "  Alice@Corp.com ", "password123")

        assert user.email == "alice@corp.com"
        assert user.password_hash != "password123"
        assert user.password_hash.startswith("$2")
        mock_repo.get_by_email.assert_called_once_with("alice@corp.com")
        mock_repo.create.assert_called_once()

    def test_unknown_role_defaults_to_employee(self, service):
        user = service.register("Alice", "alice@corp.com", "password123", role="root")
        assert user.role == "employee"

    def test_admin_role_is_kept(self, service):
        user = service.register("Admin", "admin@corp.com", "password123", role="admin")
        assert user.is_admin

    def test_short_password_is_rejected(self, service, mock_repo):
        with pytest.raises(WeakPasswordError):
            service.register("Alice", "alice@corp.com", "short")
        mock_repo.create.assert_not_called()

    def test_missing_name_is_rejected(self, service):
        with pytest.raises(InvalidInputError):
            service.register("  ", "alice@corp.com", "password123")

    def test_duplicate_email_is_rejected(self, service, mock_repo):
        mock_repo.get_by_email.return_value = stored_user()

        with pytest.raises(UserAlreadyExistsError):
            service.register("Alice", "ALICE@corp.com", "password123")
        mock_repo.create.assert_not_called()


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.auth
class TestLogin:
    def test_login_returns_token_for_valid_credentials(self, service, mock_repo, tokens):
        mock_repo.get_by_email.return_value = stored_user()

        token, user = service.login("Alice@corp.com", "password123")

        claims = tokens.validate(token)
        assert claims.user_id == 7
        assert claims.email == "alice@corp.com"
        assert claims.role == "employee"
        assert user.id == 7

    def test_wrong_password_and_unknown_email_fail_identically(self, service, mock_repo):
        mock_repo.get_by_email.return_value = stored_user()
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            service.login("alice@corp.com", "not-the-password")

        mock_repo.get_by_email.return_value = None
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            service.login("nobody@corp.com", "password123")

        assert str(wrong_password.value) == str(unknown_email.value)

    def test_validate_token_rejects_garbage(self, service):
        with pytest.raises(InvalidTokenError):
            service.validate_token("not.a.token")

    def test_get_user_by_id_missing(self, service):
        with pytest.raises(UserNotFoundError):
            service.get_user_by_id(99)
