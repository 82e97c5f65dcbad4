import dataclasses
import logging
from typing import List, Optional

from mentorship.core.exceptions import (
    InvalidInputError,
    InvalidRequestTransitionError,
    RequestAlreadyApprovedError,
    RequestAlreadyRejectedError,
    RequestNotFoundError,
    UserNotFoundError,
)
from mentorship.core.metrics import MetricsSink, NullMetricsSink
from mentorship.domain.entities import RequestStatus
from mentorship.domain.entities import TrainingRequest as DomainRequest
from mentorship.domain.interfaces import IRequestRepository, IUserReader

logger = logging.getLogger(__name__)


class RequestService:
    """Training request lifecycle.

    Status is a one-way machine: pending -> approved or pending -> rejected.
    Both targets are terminal. Ownership checks live at the HTTP boundary.
    """

    def __init__(
        self,
        repo: IRequestRepository,
        user_repo: IUserReader,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        self.repo = repo
        self.user_repo = user_repo
        self.metrics = metrics or NullMetricsSink()

    def create_request(self, user_id: int, topic: str, description: str) -> DomainRequest:
        if not topic or not topic.strip() or not description or not description.strip():
            raise InvalidInputError("topic and description are required")
        if self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundError()

        request = DomainRequest(
            user_id=user_id,
            topic=topic.strip(),
            description=description.strip(),
            status=RequestStatus.PENDING,
        )
        created = self.repo.create(request)
        self.metrics.request_created(created.status)

        logger.info(
            "Training request created",
            extra={"context": {"request_id": created.id, "user_id": user_id}},
        )
        return created

    def get_request(self, request_id: int) -> DomainRequest:
        request = self.repo.get_by_id(request_id)
        if request is None:
            raise RequestNotFoundError()
        return request

    def get_user_requests(self, user_id: int) -> List[DomainRequest]:
        return self.repo.get_by_user_id(user_id)

    def get_all_requests(self, status: Optional[str] = None) -> List[DomainRequest]:
        if status and status not in RequestStatus.ALL:
            raise InvalidInputError(f"unknown request status '{status}'")
        return self.repo.get_all(status=status or None)

    def approve_request(self, request_id: int) -> DomainRequest:
        request = self.get_request(request_id)
        if request.is_approved:
            raise RequestAlreadyApprovedError()
        if request.is_rejected:
            raise InvalidRequestTransitionError("rejected request cannot be approved")
        return self._transition(request, RequestStatus.APPROVED)

    def reject_request(self, request_id: int) -> DomainRequest:
        request = self.get_request(request_id)
        if request.is_rejected:
            raise RequestAlreadyRejectedError()
        if request.is_approved:
            raise InvalidRequestTransitionError("approved request cannot be rejected")
        return self._transition(request, RequestStatus.REJECTED)

    def update_request(
        self,
        request_id: int,
        topic: Optional[str] = None,
        description: Optional[str] = None,
    ) -> DomainRequest:
        """Edit topic and/or description. Status is never touched here."""
        request = self.get_request(request_id)
        fields = {}
        if topic is not None:
            fields["topic"] = topic.strip()
        if description is not None:
            fields["description"] = description.strip()
        if not fields:
            return request

        updated = dataclasses.replace(request, **fields)
        return self.repo.update(updated)

    def _transition(self, request: DomainRequest, new_status: str) -> DomainRequest:
        old_status = request.status
        # Guarded on the status we read, so a concurrent decision wins cleanly
        if not self.repo.update_status(request.id, new_status, expected_status=old_status):
            current = self.get_request(request.id)
            if current.status == new_status:
                raise (
                    RequestAlreadyApprovedError()
                    if new_status == RequestStatus.APPROVED
                    else RequestAlreadyRejectedError()
                )
            raise InvalidRequestTransitionError()

        self.metrics.request_status_changed(old_status, new_status)
        logger.info(
            "Training request status changed",
            extra={
                "context": {
                    "request_id": request.id,
                    "from": old_status,
                    "to": new_status,
                }
            },
        )
        return dataclasses.replace(request, status=new_status)
