"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from mentorship.core.exceptions import (
    InvalidEmailError,
    InvalidInputError,
    InvalidRatingError,
    InvalidWorkloadError,
    LearningNotActiveError,
    PlanItemNotFoundError,
    PlanLimitReachedError,
)

MAX_MENTOR_WORKLOAD = 5
MAX_PLAN_ITEMS = 255
MIN_RATING = 1
MAX_RATING = 5


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole:
    EMPLOYEE = "employee"
    ADMIN = "admin"

    ALL = (EMPLOYEE, ADMIN)


class RequestStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)


class LearningStatus:
    ACTIVE = "active"
    COMPLETED = "completed"

    ALL = (ACTIVE, COMPLETED)


@dataclass
class User:
    """Domain entity representing an employee or administrator.

    The password hash travels with the entity so the auth service can
    verify credentials, but it is never serialized by the response layer.
    """

    id: Optional[int] = None
    name: str = ""
    email: str = ""
    password_hash: str = ""
    role: str = UserRole.EMPLOYEE
    department: Optional[str] = None
    job_title: Optional[str] = None
    telegram: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate domain rules."""
        if not self.name or not self.name.strip():
            raise InvalidInputError("name is required")
        if not self.email:
            raise InvalidInputError("email is required")
        if "@" not in self.email:
            raise InvalidEmailError()
        if self.role not in UserRole.ALL:
            raise InvalidInputError(f"unknown role '{self.role}'")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE


@dataclass
class Mentor:
    """Domain entity for a mentor and their current student load."""

    id: Optional[int] = None
    name: str = ""
    job_title: str = ""
    email: str = ""
    experience: Optional[str] = None
    telegram: Optional[str] = None
    workload: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if not self.name or not self.name.strip():
            raise InvalidInputError("name is required")
        if not self.job_title or not self.job_title.strip():
            raise InvalidInputError("jobTitle is required")
        if not self.email:
            raise InvalidInputError("email is required")
        if "@" not in self.email:
            raise InvalidEmailError()
        if not 0 <= self.workload <= MAX_MENTOR_WORKLOAD:
            raise InvalidWorkloadError()

    @property
    def is_available(self) -> bool:
        return self.workload < MAX_MENTOR_WORKLOAD

    def can_take_student(self) -> bool:
        """A mentor can accept one more student while workload <= 4."""
        return self.workload <= MAX_MENTOR_WORKLOAD - 1


@dataclass
class TrainingRequest:
    """Domain entity for an employee's request to learn a topic."""

    id: Optional[int] = None
    user_id: int = 0
    topic: str = ""
    description: str = ""
    status: str = RequestStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.user_id <= 0:
            raise InvalidInputError("valid user_id is required")
        if not self.topic or not self.topic.strip():
            raise InvalidInputError("topic is required")
        if not self.description or not self.description.strip():
            raise InvalidInputError("description is required")
        if self.status not in RequestStatus.ALL:
            raise InvalidInputError(f"unknown request status '{self.status}'")

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == RequestStatus.APPROVED

    @property
    def is_rejected(self) -> bool:
        return self.status == RequestStatus.REJECTED


@dataclass
class LearningPlanItem:
    """One checklist entry within a learning plan."""

    id: int = 0
    text: str = ""
    completed: bool = False

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise InvalidInputError("plan item text cannot be empty")

    def toggle(self) -> None:
        self.completed = not self.completed


@dataclass(frozen=True)
class Feedback:
    """Immutable mentee feedback attached when a learning process completes."""

    rating: int
    comment: str

    def __post_init__(self):
        if not isinstance(self.rating, int) or isinstance(self.rating, bool):
            raise InvalidRatingError()
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise InvalidRatingError()
        if not self.comment or not self.comment.strip():
            raise InvalidInputError("comment is required")


@dataclass
class LearningProcess:
    """Tracked engagement between one user, one mentor and a plan of tasks.

    Invariants:
    - status is either 'active' or 'completed'; only active -> completed
    - end_date and feedback are set exactly when status is 'completed'
    - plan item ids are unique within the plan
    """

    id: Optional[int] = None
    request_id: int = 0
    user_id: int = 0
    mentor_id: int = 0
    status: str = LearningStatus.ACTIVE
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    plan: List[LearningPlanItem] = field(default_factory=list)
    notes: Optional[str] = None
    feedback: Optional[Feedback] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.status not in LearningStatus.ALL:
            raise InvalidInputError(f"unknown learning status '{self.status}'")
        ids = [item.id for item in self.plan]
        if len(ids) != len(set(ids)):
            raise InvalidInputError("plan item ids must be unique")

    @property
    def is_active(self) -> bool:
        return self.status == LearningStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status == LearningStatus.COMPLETED

    def ensure_active(self) -> None:
        if not self.is_active:
            raise LearningNotActiveError()

    def next_plan_item_id(self) -> int:
        """Return max existing id + 1, refusing once the plan is full."""
        if len(self.plan) >= MAX_PLAN_ITEMS:
            raise PlanLimitReachedError()
        next_id = max((item.id for item in self.plan), default=0) + 1
        if next_id > MAX_PLAN_ITEMS:
            raise PlanLimitReachedError()
        return next_id

    def get_plan_item(self, item_id: int) -> LearningPlanItem:
        for item in self.plan:
            if item.id == item_id:
                return item
        raise PlanItemNotFoundError()

    def add_plan_item(self, text: str) -> LearningPlanItem:
        self.ensure_active()
        item = LearningPlanItem(id=self.next_plan_item_id(), text=text)
        self.plan.append(item)
        self.updated_at = utcnow()
        return item

    def update_plan_item(
        self, item_id: int, text: Optional[str], completed: bool
    ) -> LearningPlanItem:
        """Update an item in place; an empty text keeps the current one."""
        self.ensure_active()
        item = self.get_plan_item(item_id)
        if text:
            if not text.strip():
                raise InvalidInputError("plan item text cannot be empty")
            item.text = text
        item.completed = completed
        self.updated_at = utcnow()
        return item

    def toggle_plan_item(self, item_id: int) -> LearningPlanItem:
        self.ensure_active()
        item = self.get_plan_item(item_id)
        item.toggle()
        self.updated_at = utcnow()
        return item

    def remove_plan_item(self, item_id: int) -> None:
        self.ensure_active()
        item = self.get_plan_item(item_id)
        self.plan.remove(item)
        self.updated_at = utcnow()

    def replace_plan(self, items: List[LearningPlanItem]) -> None:
        self.ensure_active()
        ids = [item.id for item in items]
        if len(ids) != len(set(ids)):
            raise InvalidInputError("plan item ids must be unique")
        if len(items) > MAX_PLAN_ITEMS:
            raise PlanLimitReachedError()
        self.plan = list(items)
        self.updated_at = utcnow()

    def set_notes(self, notes: Optional[str]) -> None:
        self.ensure_active()
        self.notes = notes or None
        self.updated_at = utcnow()

    def complete(self, rating: int, comment: str) -> Feedback:
        """The single terminal transition: active -> completed."""
        self.ensure_active()
        feedback = Feedback(rating=rating, comment=comment)
        now = utcnow()
        self.status = LearningStatus.COMPLETED
        self.feedback = feedback
        self.end_date = now
        self.updated_at = now
        return feedback

    @property
    def completed_items_count(self) -> int:
        return sum(1 for item in self.plan if item.completed)

    def progress(self) -> float:
        """Percentage of completed plan items; 0.0 for an empty plan."""
        if not self.plan:
            return 0.0
        return self.completed_items_count / len(self.plan) * 100
