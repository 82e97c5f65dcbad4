from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from mentorship.core.exceptions import InvalidTokenError

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

JWT_ALGORITHM = "HS256"

# Verified against when the email is unknown so both login failure paths cost
# one bcrypt round.
_DUMMY_PASSWORD_HASH = pwd_context.hash("not-a-real-password")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to verify against

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def burn_password_check(plain_password: str) -> None:
    """Run a throwaway verification for a user that does not exist."""
    pwd_context.verify(plain_password, _DUMMY_PASSWORD_HASH)


@dataclass(frozen=True)
class TokenClaims:
    """Identity extracted from a valid access token."""

    user_id: int
    email: str
    role: str


class TokenManager:
    """Issues and validates HMAC-signed access tokens."""

    def __init__(self, secret: str, ttl: timedelta) -> None:
        self.secret = secret
        self.ttl = ttl

    def create_access_token(self, user_id: int, email: str, role: str) -> str:
        """Create a JWT access token.

        Payload: {user_id, email, role, iat, exp}
        """
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "user_id": user_id,
            "email": email,
            "role": role,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Decode and validate a JWT access token.

        Only HS256 is accepted; tokens signed with any other algorithm
        (including ``none``) are rejected.

        Raises:
            InvalidTokenError: If the token is malformed, tampered or expired
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("token has expired")
        except jwt.PyJWTError:
            raise InvalidTokenError()

    def validate(self, token: str) -> TokenClaims:
        """Extract user information from a JWT token."""
        payload = self.decode_access_token(token)

        user_id = payload.get("user_id")
        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not role:
            raise InvalidTokenError("invalid token payload")

        return TokenClaims(user_id=user_id, email=email or "", role=role)
