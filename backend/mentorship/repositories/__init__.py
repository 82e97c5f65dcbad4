from .learning_repo import LearningRepository
from .mentor_repo import MentorRepository
from .request_repo import RequestRepository
from .user_repo import UserRepository

__all__ = [
    "UserRepository",
    "RequestRepository",
    "MentorRepository",
    "LearningRepository",
]
