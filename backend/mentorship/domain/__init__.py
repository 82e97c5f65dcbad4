"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities with business logic
- interfaces.py: Repository contracts
"""

from .entities import (
    Feedback,
    LearningPlanItem,
    LearningProcess,
    LearningStatus,
    Mentor,
    RequestStatus,
    TrainingRequest,
    User,
    UserRole,
)
from .interfaces import (
    ILearningRepository,
    IMentorRepository,
    IRequestRepository,
    IUserReader,
    IUserRepository,
    IUserWriter,
)

__all__ = [
    # Domain entities
    "User",
    "UserRole",
    "Mentor",
    "TrainingRequest",
    "RequestStatus",
    "LearningProcess",
    "LearningStatus",
    "LearningPlanItem",
    "Feedback",
    # Repository interfaces
    "IUserRepository",
    "IRequestRepository",
    "IMentorRepository",
    "ILearningRepository",
    # Segregated interfaces
    "IUserReader",
    "IUserWriter",
]
