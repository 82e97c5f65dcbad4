from typing import List, Optional

from mentorship.db.base import User as DbUser
from mentorship.domain.entities import User as DomainUser
from mentorship.domain.interfaces import IUserRepository


class UserRepository(IUserRepository):
    """Repository for User persistence operations following SOLID principles.

    This implementation:
    - Implements IUserRepository interface (Dependency Inversion)
    - Handles data access only (Single Responsibility)
    - Maps between domain entities and database models
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, user_id: int) -> Optional[DomainUser]:
        """Get user by ID, returning domain entity."""
        db_user = self.db.query(DbUser).filter_by(id=user_id).first()
        return self._to_domain(db_user) if db_user else None

    def get_by_email(self, email: str) -> Optional[DomainUser]:
        """Get user by email, returning domain entity."""
        db_user = self.db.query(DbUser).filter_by(email=email).first()
        return self._to_domain(db_user) if db_user else None

    def get_all(self) -> List[DomainUser]:
        db_users = self.db.query(DbUser).order_by(DbUser.id).all()
        return [self._to_domain(db_user) for db_user in db_users]

    def create(self, user: DomainUser) -> DomainUser:
        """Create a new user from domain entity."""
        db_user = DbUser(
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role,
            department=user.department,
            job_title=user.job_title,
            telegram=user.telegram,
        )

        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)

        return self._to_domain(db_user)

    def update(self, user: DomainUser) -> DomainUser:
        """Update an existing user from domain entity."""
        if not user.id:
            raise ValueError("User ID is required for update")

        db_user = self.db.query(DbUser).filter_by(id=user.id).first()
        if not db_user:
            raise ValueError(f"User with ID {user.id} not found")

        db_user.name = user.name
        db_user.email = user.email
        db_user.password_hash = user.password_hash
        db_user.role = user.role
        db_user.department = user.department
        db_user.job_title = user.job_title
        db_user.telegram = user.telegram

        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)

        return self._to_domain(db_user)

    def delete(self, user_id: int) -> bool:
        """Delete a user by ID."""
        db_user = self.db.query(DbUser).filter_by(id=user_id).first()
        if not db_user:
            return False

        self.db.delete(db_user)
        self.db.commit()
        return True

    def _to_domain(self, db_user: DbUser) -> DomainUser:
        """Convert database model to domain entity."""
        return DomainUser(
            id=db_user.id,
            name=db_user.name,
            email=db_user.email,
            password_hash=db_user.password_hash,
            role=db_user.role or "employee",
            department=db_user.department,
            job_title=db_user.job_title,
            telegram=db_user.telegram,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at,
        )
