"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Every error carries the HTTP status the boundary answers with, so
controllers can simply raise and let the registered error handlers
translate.
"""


class AppError(Exception):
    """Base class for all expected application errors."""

    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ===========================
# Validation errors (400)
# ===========================


class ValidationError(AppError):
    status_code = 400
    default_message = "invalid input data"


class InvalidInputError(ValidationError):
    default_message = "invalid input data"


class InvalidEmailError(ValidationError):
    default_message = "invalid email format"


class WeakPasswordError(ValidationError):
    default_message = "password must be at least 8 characters"


class InvalidRatingError(ValidationError):
    default_message = "rating must be between 1 and 5"


class InvalidWorkloadError(ValidationError):
    default_message = "workload must be between 0 and 5"


# ===========================
# Not found errors (404)
# ===========================


class NotFoundError(AppError):
    status_code = 404
    default_message = "resource not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class MentorNotFoundError(NotFoundError):
    default_message = "mentor not found"


class RequestNotFoundError(NotFoundError):
    default_message = "training request not found"


class LearningNotFoundError(NotFoundError):
    default_message = "learning process not found"


class PlanItemNotFoundError(NotFoundError):
    default_message = "plan item not found"


# ===========================
# State / conflict errors (400)
# ===========================


class DomainStateError(AppError):
    status_code = 400
    default_message = "operation not allowed in the current state"


class UserAlreadyExistsError(DomainStateError):
    default_message = "user already exists"


class RequestAlreadyApprovedError(DomainStateError):
    default_message = "request already approved"


class RequestAlreadyRejectedError(DomainStateError):
    default_message = "request already rejected"


class InvalidRequestTransitionError(DomainStateError):
    default_message = "invalid request status transition"


class RequestNotApprovedError(DomainStateError):
    default_message = "request must be approved before assigning mentor"


class MentorNotAvailableError(DomainStateError):
    default_message = "mentor is not available (workload full)"


class LearningNotActiveError(DomainStateError):
    default_message = "learning process is not active"


class LearningAlreadyExistsError(DomainStateError):
    default_message = "learning process already exists for this request"


class PlanLimitReachedError(DomainStateError):
    default_message = "learning plan item limit reached"


class MentorHasLearningsError(DomainStateError):
    default_message = "mentor has learning processes and cannot be deleted"


class UserHasActiveLearningsError(DomainStateError):
    default_message = "user has active learning processes and cannot be deleted"


# ===========================
# Auth errors (401 / 403)
# ===========================


class AuthenticationError(AppError):
    status_code = 401
    default_message = "unauthorized"


class InvalidCredentialsError(AuthenticationError):
    default_message = "invalid credentials"


class InvalidTokenError(AuthenticationError):
    default_message = "invalid or expired token"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "forbidden: insufficient permissions"
