"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing. Every getter returns
``None`` when the row does not exist; services decide which not-found
error to raise.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Feedback, LearningPlanItem, LearningProcess, Mentor, TrainingRequest, User


class IUserReader(ABC):
    """Interface for user read operations - Interface Segregation Principle."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    def get_all(self) -> List[User]:
        """Get all users."""
        pass


class IUserWriter(ABC):
    """Interface for user write operations - Interface Segregation Principle."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    def update(self, user: User) -> User:
        """Update an existing user."""
        pass

    @abstractmethod
    def delete(self, user_id: int) -> bool:
        """Delete a user."""
        pass


class IUserRepository(IUserReader, IUserWriter):
    """Complete user repository interface combining read/write operations."""

    pass


class IRequestRepository(ABC):
    """Training request persistence contract."""

    @abstractmethod
    def create(self, request: TrainingRequest) -> TrainingRequest:
        pass

    @abstractmethod
    def get_by_id(self, request_id: int) -> Optional[TrainingRequest]:
        pass

    @abstractmethod
    def get_by_user_id(self, user_id: int) -> List[TrainingRequest]:
        pass

    @abstractmethod
    def get_all(self, status: Optional[str] = None) -> List[TrainingRequest]:
        """Get all requests, optionally filtered by status."""
        pass

    @abstractmethod
    def update(self, request: TrainingRequest) -> TrainingRequest:
        """Persist topic and description."""
        pass

    @abstractmethod
    def update_status(
        self, request_id: int, status: str, expected_status: Optional[str] = None
    ) -> bool:
        """Set the status column only.

        When ``expected_status`` is given the write only applies if the row
        still holds that status. Returns False when nothing changed.
        """
        pass


class IMentorRepository(ABC):
    """Mentor persistence contract, including atomic workload counters."""

    @abstractmethod
    def create(self, mentor: Mentor) -> Mentor:
        pass

    @abstractmethod
    def get_by_id(self, mentor_id: int) -> Optional[Mentor]:
        pass

    @abstractmethod
    def get_all(self, max_workload: Optional[int] = None) -> List[Mentor]:
        """Mentors ordered by workload then name, optionally capped."""
        pass

    @abstractmethod
    def update(self, mentor: Mentor) -> Mentor:
        pass

    @abstractmethod
    def delete(self, mentor_id: int) -> bool:
        pass

    @abstractmethod
    def try_increment_workload(self, mentor_id: int, limit: int) -> bool:
        """Add one student if workload < limit. False when nothing changed."""
        pass

    @abstractmethod
    def decrement_workload(self, mentor_id: int) -> bool:
        """Remove one student if workload > 0. False when nothing changed."""
        pass


class ILearningRepository(ABC):
    """Learning process persistence contract.

    The plan is stored as a single structured value and always written
    back whole.
    """

    @abstractmethod
    def create(self, learning: LearningProcess) -> LearningProcess:
        pass

    @abstractmethod
    def get_by_id(self, learning_id: int) -> Optional[LearningProcess]:
        pass

    @abstractmethod
    def get_by_request_id(self, request_id: int) -> Optional[LearningProcess]:
        pass

    @abstractmethod
    def get_by_user_id(self, user_id: int) -> List[LearningProcess]:
        pass

    @abstractmethod
    def get_by_mentor_id(self, mentor_id: int) -> List[LearningProcess]:
        pass

    @abstractmethod
    def get_all(self) -> List[LearningProcess]:
        pass

    @abstractmethod
    def count_by_status(self, status: str) -> int:
        pass

    @abstractmethod
    def delete(self, learning_id: int) -> bool:
        pass

    @abstractmethod
    def update_plan(self, learning_id: int, plan: List[LearningPlanItem]) -> bool:
        pass

    @abstractmethod
    def update_notes(self, learning_id: int, notes: Optional[str]) -> bool:
        pass

    @abstractmethod
    def complete(self, learning_id: int, feedback: Feedback) -> bool:
        """Flip an active process to completed. False if it was not active."""
        pass

    @abstractmethod
    def update(self, learning: LearningProcess) -> LearningProcess:
        """Full overwrite used by the administrative override."""
        pass
