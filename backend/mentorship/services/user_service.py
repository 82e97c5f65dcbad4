import dataclasses
import logging
from typing import Any, Dict, List, Optional

from mentorship.core.exceptions import (
    UserAlreadyExistsError,
    UserHasActiveLearningsError,
    UserNotFoundError,
)
from mentorship.core.security import hash_password
from mentorship.domain.entities import User as DomainUser
from mentorship.domain.interfaces import ILearningRepository, IUserRepository
from mentorship.services.auth_service import ensure_password_policy, normalize_email

logger = logging.getLogger(__name__)

# Profile fields a partial update may touch
UPDATABLE_FIELDS = ("name", "email", "department", "job_title", "telegram", "password")


class UserService:
    """Application service for user administration and profile edits.

    Works with domain entities only; the repository decides how they are
    stored.
    """

    def __init__(
        self, repo: IUserRepository, learning_repo: Optional[ILearningRepository] = None
    ) -> None:
        self.repo = repo
        self.learning_repo = learning_repo

    def get_user(self, user_id: int) -> DomainUser:
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def list_users(self) -> List[DomainUser]:
        return self.repo.get_all()

    def update_user(self, user_id: int, changes: Dict[str, Any]) -> DomainUser:
        """Apply a partial update.

        Only keys present in ``changes`` (and listed in UPDATABLE_FIELDS) are
        applied. A new email must stay unique; a new password obeys the
        minimum length and is re-hashed.
        """
        user = self.get_user(user_id)
        fields: Dict[str, Any] = {}

        for key in UPDATABLE_FIELDS:
            if key not in changes or changes[key] is None:
                continue
            value = changes[key]

            if key == "password":
                ensure_password_policy(value)
                fields["password_hash"] = hash_password(value)
            elif key == "email":
                email = normalize_email(value)
                if email != user.email:
                    existing = self.repo.get_by_email(email)
                    if existing is not None and existing.id != user.id:
                        raise UserAlreadyExistsError("email already in use")
                fields["email"] = email
            elif key == "name":
                fields["name"] = value.strip() if isinstance(value, str) else value
            else:
                fields[key] = value or None

        if not fields:
            return user

        # replace() re-runs entity validation on the merged values
        updated = dataclasses.replace(user, **fields)
        saved = self.repo.update(updated)

        logger.info(
            "User updated",
            extra={
                "context": {
                    "user_id": user_id,
                    "fields": sorted(k for k in changes if k in UPDATABLE_FIELDS),
                }
            },
        )
        return saved

    def update_current_user(self, user_id: int, changes: Dict[str, Any]) -> DomainUser:
        """Profile edit by the authenticated user; same rules as the admin path."""
        return self.update_user(user_id, changes)

    def delete_user(self, user_id: int) -> None:
        """Delete a user together with their requests and finished learnings.

        Refused while a learning process is still active, since removing it
        would leave the mentor's workload slot taken.
        """
        if self.learning_repo is not None and any(
            learning.is_active for learning in self.learning_repo.get_by_user_id(user_id)
        ):
            raise UserHasActiveLearningsError()
        if not self.repo.delete(user_id):
            raise UserNotFoundError()
        logger.info("User deleted", extra={"context": {"user_id": user_id}})
