"""
Shared controller plumbing: JSON body parsing and service construction.

Services are built per request around the request's database session; the
metrics sink and token manager are app-wide and live in ``app.extensions``.
"""

from typing import Any, Dict

from flask import current_app, request

from mentorship.core.auth_decorators import TOKEN_MANAGER_EXTENSION
from mentorship.core.exceptions import InvalidInputError
from mentorship.core.metrics import MetricsSink, NullMetricsSink
from mentorship.repositories import (
    LearningRepository,
    MentorRepository,
    RequestRepository,
    UserRepository,
)
from mentorship.services.auth_service import AuthService
from mentorship.services.learning_service import LearningService
from mentorship.services.mentor_service import MentorService
from mentorship.services.request_service import RequestService
from mentorship.services.user_service import UserService

METRICS_EXTENSION = "mentorship.metrics"


def get_json_body(allow_list: bool = False) -> Any:
    """Return the decoded JSON body or raise InvalidInputError."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    if allow_list and isinstance(data, list):
        return data
    raise InvalidInputError("invalid JSON body")


def get_metrics() -> MetricsSink:
    return current_app.extensions.get(METRICS_EXTENSION) or NullMetricsSink()


def build_auth_service(db) -> AuthService:
    return AuthService(UserRepository(db), current_app.extensions[TOKEN_MANAGER_EXTENSION])


def build_user_service(db) -> UserService:
    return UserService(UserRepository(db), LearningRepository(db))


def build_request_service(db) -> RequestService:
    return RequestService(RequestRepository(db), UserRepository(db), get_metrics())


def build_mentor_service(db) -> MentorService:
    return MentorService(MentorRepository(db), LearningRepository(db), get_metrics())


def build_learning_service(db) -> LearningService:
    metrics = get_metrics()
    learning_repo = LearningRepository(db)
    mentor_service = MentorService(MentorRepository(db), learning_repo, metrics)
    return LearningService(learning_repo, RequestRepository(db), mentor_service, metrics)


def list_payload(items, response_cls) -> list[Dict[str, Any]]:
    return [response_cls.from_domain(item).to_dict() for item in items]
