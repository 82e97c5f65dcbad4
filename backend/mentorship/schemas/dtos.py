"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Request DTOs are built from the decoded JSON body with ``from_json`` and
checked with ``validate()``; both raise ``InvalidInputError``. Response DTOs
are built with ``from_domain`` and rendered with camelCase keys by
``to_dict``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from mentorship.core.exceptions import InvalidInputError


def _str_field(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{key} must be a string")
    return value


def _required(value: Optional[str], key: str) -> None:
    if not value or not value.strip():
        raise InvalidInputError(f"{key} is required")


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ===========================
# Auth / users
# ===========================


@dataclass
class RegisterRequest:
    """DTO for self-registration."""

    name: Optional[str]
    email: Optional[str]
    password: Optional[str]
    role: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    telegram: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RegisterRequest":
        return cls(
            name=_str_field(data, "name"),
            email=_str_field(data, "email"),
            password=_str_field(data, "password"),
            role=_str_field(data, "role"),
            department=_str_field(data, "department"),
            job_title=_str_field(data, "jobTitle"),
            telegram=_str_field(data, "telegram"),
        )

    def validate(self) -> None:
        _required(self.name, "name")
        _required(self.email, "email")
        if self.password is None:
            raise InvalidInputError("password is required")


@dataclass
class LoginRequest:
    email: Optional[str]
    password: Optional[str]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "LoginRequest":
        return cls(email=_str_field(data, "email"), password=_str_field(data, "password"))

    def validate(self) -> None:
        if not self.email or not self.password:
            raise InvalidInputError("email and password are required")


@dataclass
class ProfileUpdateRequest:
    """Partial profile update; only keys present in the body are applied."""

    changes: Dict[str, Any] = field(default_factory=dict)

    FIELD_MAP = {
        "name": "name",
        "email": "email",
        "department": "department",
        "jobTitle": "job_title",
        "telegram": "telegram",
        "password": "password",
    }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ProfileUpdateRequest":
        changes = {}
        for json_key, attr in cls.FIELD_MAP.items():
            if json_key in data:
                changes[attr] = _str_field(data, json_key)
        return cls(changes=changes)

    def validate(self) -> None:
        if "name" in self.changes and self.changes["name"] is not None:
            _required(self.changes["name"], "name")
        if "email" in self.changes and self.changes["email"] is not None:
            _required(self.changes["email"], "email")


@dataclass
class UserResponse:
    """DTO for user API responses. The password hash is never included."""

    id: int
    name: str
    email: str
    role: str
    department: Optional[str]
    job_title: Optional[str]
    telegram: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            department=user.department,
            job_title=user.job_title,
            telegram=user.telegram,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "department": self.department,
            "jobTitle": self.job_title,
            "telegram": self.telegram,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


# ===========================
# Training requests
# ===========================


@dataclass
class CreateTrainingRequest:
    topic: Optional[str]
    description: Optional[str]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CreateTrainingRequest":
        return cls(
            topic=_str_field(data, "topic"),
            description=_str_field(data, "description"),
        )

    def validate(self) -> None:
        _required(self.topic, "topic")
        _required(self.description, "description")


@dataclass
class UpdateTrainingRequest:
    topic: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "UpdateTrainingRequest":
        return cls(
            topic=_str_field(data, "topic"),
            description=_str_field(data, "description"),
        )

    def validate(self) -> None:
        if self.topic is None and self.description is None:
            raise InvalidInputError("topic or description is required")
        if self.topic is not None:
            _required(self.topic, "topic")
        if self.description is not None:
            _required(self.description, "description")


@dataclass
class AssignMentorRequest:
    mentor_id: Any

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "AssignMentorRequest":
        return cls(mentor_id=data.get("mentorId"))

    def validate(self) -> None:
        if (
            not isinstance(self.mentor_id, int)
            or isinstance(self.mentor_id, bool)
            or self.mentor_id <= 0
        ):
            raise InvalidInputError("mentorId is required")


@dataclass
class TrainingRequestResponse:
    id: int
    user_id: int
    topic: str
    description: str
    status: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, request) -> "TrainingRequestResponse":
        return cls(
            id=request.id,
            user_id=request.user_id,
            topic=request.topic,
            description=request.description,
            status=request.status,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "topic": self.topic,
            "description": self.description,
            "status": self.status,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


# ===========================
# Mentors
# ===========================


@dataclass
class MentorRequest:
    """Create (workload ignored) or full admin update (workload 0..5)."""

    name: Optional[str]
    job_title: Optional[str]
    email: Optional[str]
    experience: Optional[str] = None
    telegram: Optional[str] = None
    workload: Any = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "MentorRequest":
        return cls(
            name=_str_field(data, "name"),
            job_title=_str_field(data, "jobTitle"),
            email=_str_field(data, "email"),
            experience=_str_field(data, "experience"),
            telegram=_str_field(data, "telegram"),
            workload=data.get("workload"),
        )

    def validate(self) -> None:
        _required(self.name, "name")
        _required(self.job_title, "jobTitle")
        _required(self.email, "email")


@dataclass
class MentorResponse:
    id: int
    name: str
    job_title: str
    experience: Optional[str]
    workload: int
    email: str
    telegram: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, mentor) -> "MentorResponse":
        return cls(
            id=mentor.id,
            name=mentor.name,
            job_title=mentor.job_title,
            experience=mentor.experience,
            workload=mentor.workload,
            email=mentor.email,
            telegram=mentor.telegram,
            created_at=mentor.created_at,
            updated_at=mentor.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "jobTitle": self.job_title,
            "experience": self.experience,
            "workload": self.workload,
            "email": self.email,
            "telegram": self.telegram,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


# ===========================
# Learning processes
# ===========================


@dataclass
class PlanItemRequest:
    """Body for adding (text) or updating (text?, completed) one plan item."""

    text: Optional[str] = None
    completed: Any = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PlanItemRequest":
        return cls(text=_str_field(data, "text"), completed=data.get("completed"))

    def validate_for_add(self) -> None:
        _required(self.text, "text")

    def validate_for_update(self) -> None:
        if not isinstance(self.completed, bool):
            raise InvalidInputError("completed must be a boolean")


@dataclass
class UpdatePlanRequest:
    plan: Any

    @classmethod
    def from_json(cls, data: Any) -> "UpdatePlanRequest":
        # Accept either a bare array or {"plan": [...]}
        if isinstance(data, dict):
            return cls(plan=data.get("plan"))
        return cls(plan=data)

    def validate(self) -> None:
        if not isinstance(self.plan, list):
            raise InvalidInputError("plan must be a list of items")
        for entry in self.plan:
            if not isinstance(entry, dict):
                raise InvalidInputError("plan items must be objects")
            text = entry.get("text")
            if not isinstance(text, str) or not text.strip():
                raise InvalidInputError("plan item text cannot be empty")
            if not isinstance(entry.get("completed", False), bool):
                raise InvalidInputError("completed must be a boolean")


@dataclass
class UpdateNotesRequest:
    notes: Optional[str]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "UpdateNotesRequest":
        return cls(notes=_str_field(data, "notes"))


@dataclass
class CompleteLearningRequest:
    rating: Any
    comment: Optional[str]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CompleteLearningRequest":
        return cls(rating=data.get("rating"), comment=_str_field(data, "comment"))

    def validate(self) -> None:
        if self.rating is None:
            raise InvalidInputError("rating is required")
        _required(self.comment, "comment")


@dataclass
class LearningOverrideRequest:
    """Administrative full overwrite; keys absent from the body are kept."""

    changes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "LearningOverrideRequest":
        changes = {}
        for key in ("status", "plan", "notes", "feedback"):
            if key in data:
                changes[key] = data[key]
        return cls(changes=changes)

    def validate(self) -> None:
        if not self.changes:
            raise InvalidInputError("nothing to update")
        if "plan" in self.changes and self.changes["plan"] is not None:
            UpdatePlanRequest(plan=self.changes["plan"]).validate()
        if "notes" in self.changes and self.changes["notes"] is not None:
            if not isinstance(self.changes["notes"], str):
                raise InvalidInputError("notes must be a string")


@dataclass
class LearningResponse:
    id: int
    request_id: int
    user_id: int
    mentor_id: int
    status: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    plan: List[Dict[str, Any]]
    notes: Optional[str]
    feedback: Optional[Dict[str, Any]]
    progress: float
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, learning) -> "LearningResponse":
        feedback = None
        if learning.feedback is not None:
            feedback = {
                "rating": learning.feedback.rating,
                "comment": learning.feedback.comment,
            }
        return cls(
            id=learning.id,
            request_id=learning.request_id,
            user_id=learning.user_id,
            mentor_id=learning.mentor_id,
            status=learning.status,
            start_date=learning.start_date,
            end_date=learning.end_date,
            plan=[
                {"id": item.id, "text": item.text, "completed": item.completed}
                for item in learning.plan
            ],
            notes=learning.notes,
            feedback=feedback,
            progress=learning.progress(),
            created_at=learning.created_at,
            updated_at=learning.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "requestId": self.request_id,
            "userId": self.user_id,
            "mentorId": self.mentor_id,
            "status": self.status,
            "startDate": _isoformat(self.start_date),
            "endDate": _isoformat(self.end_date),
            "plan": self.plan,
            "notes": self.notes,
            "feedback": self.feedback,
            "progress": self.progress,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }
