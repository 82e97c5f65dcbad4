import logging
from typing import Optional, Tuple

from mentorship.core.exceptions import (
    InvalidCredentialsError,
    InvalidInputError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)
from mentorship.core.security import (
    TokenClaims,
    TokenManager,
    burn_password_check,
    hash_password,
    verify_password,
)
from mentorship.domain.entities import User as DomainUser
from mentorship.domain.entities import UserRole
from mentorship.domain.interfaces import IUserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def ensure_password_policy(password: Optional[str]) -> None:
    """Raise WeakPasswordError unless the password has at least 8 characters."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()


class AuthService:
    """Registration, credential verification and token handling.

    Business Rules:
    - Emails are unique (compared case-insensitively)
    - Passwords are only ever stored as bcrypt hashes
    - Login failures never reveal whether the email exists
    """

    def __init__(self, repo: IUserRepository, tokens: TokenManager) -> None:
        self.repo = repo
        self.tokens = tokens

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Optional[str] = None,
        department: Optional[str] = None,
        job_title: Optional[str] = None,
        telegram: Optional[str] = None,
    ) -> DomainUser:
        email = normalize_email(email)
        if not name or not name.strip() or not email:
            raise InvalidInputError("name, email and password are required")
        ensure_password_policy(password)

        if self.repo.get_by_email(email) is not None:
            raise UserAlreadyExistsError()

        if role not in UserRole.ALL:
            role = UserRole.EMPLOYEE

        user = DomainUser(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            role=role,
            department=department or None,
            job_title=job_title or None,
            telegram=telegram or None,
        )
        created = self.repo.create(user)

        logger.info(
            "User registered",
            extra={"context": {"user_id": created.id, "role": created.role}},
        )
        return created

    def login(self, email: str, password: str) -> Tuple[str, DomainUser]:
        """Verify credentials and issue an access token.

        Returns:
            (token, user)

        Raises:
            InvalidCredentialsError: For an unknown email and for a wrong
                password alike
        """
        user = self.repo.get_by_email(normalize_email(email))
        if user is None:
            burn_password_check(password or "")
            logger.info("Login failed", extra={"context": {"reason": "credentials"}})
            raise InvalidCredentialsError()

        if not verify_password(password or "", user.password_hash):
            logger.info("Login failed", extra={"context": {"reason": "credentials"}})
            raise InvalidCredentialsError()

        token = self.tokens.create_access_token(user.id, user.email, user.role)
        logger.info("User logged in", extra={"context": {"user_id": user.id}})
        return token, user

    def validate_token(self, token: str) -> TokenClaims:
        """Verify signature, algorithm and expiry; return the embedded identity."""
        return self.tokens.validate(token)

    def get_user_by_id(self, user_id: int) -> DomainUser:
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user
