"""
Learning process orchestration.

Assigning a mentor approves the request, creates the learning process and
takes one slot of the mentor's workload. These steps are separate writes;
when a later step fails the earlier ones are undone on a best-effort basis
(request back to pending, learning process deleted). A failed undo is
logged and not retried.
"""

import logging
from typing import Any, Dict, List, Optional

from mentorship.core.exceptions import (
    InvalidInputError,
    LearningAlreadyExistsError,
    LearningNotActiveError,
    LearningNotFoundError,
    MentorNotAvailableError,
    RequestNotApprovedError,
    RequestNotFoundError,
)
from mentorship.core.metrics import MetricsSink, NullMetricsSink
from mentorship.domain.entities import (
    Feedback,
    LearningPlanItem,
    LearningProcess,
    LearningStatus,
    RequestStatus,
    utcnow,
)
from mentorship.domain.interfaces import (
    ILearningRepository,
    IRequestRepository,
)
from mentorship.services.mentor_service import MentorService

logger = logging.getLogger(__name__)


class LearningService:
    def __init__(
        self,
        learning_repo: ILearningRepository,
        request_repo: IRequestRepository,
        mentor_service: MentorService,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        self.learning_repo = learning_repo
        self.request_repo = request_repo
        self.mentor_service = mentor_service
        self.metrics = metrics or NullMetricsSink()

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign_mentor(self, request_id: int, mentor_id: int) -> LearningProcess:
        """Approve the request (if still pending) and start a learning process.

        Raises:
            RequestNotFoundError: Unknown request
            RequestNotApprovedError: The request was rejected
            LearningAlreadyExistsError: The request already has a process
            MentorNotFoundError: Unknown mentor
            MentorNotAvailableError: Mentor is at full workload
        """
        request = self.request_repo.get_by_id(request_id)
        if request is None:
            raise RequestNotFoundError()
        if request.is_rejected:
            raise RequestNotApprovedError("rejected request cannot be assigned a mentor")
        if self.learning_repo.get_by_request_id(request_id) is not None:
            raise LearningAlreadyExistsError()

        mentor = self.mentor_service.get_mentor(mentor_id)
        if not mentor.can_take_student():
            raise MentorNotAvailableError()

        approved_here = False
        if request.is_pending:
            if not self.request_repo.update_status(
                request_id, RequestStatus.APPROVED, expected_status=RequestStatus.PENDING
            ):
                current = self.request_repo.get_by_id(request_id)
                if current is None or not current.is_approved:
                    raise RequestNotApprovedError()
            else:
                approved_here = True
                self.metrics.request_status_changed(
                    RequestStatus.PENDING, RequestStatus.APPROVED
                )

        try:
            learning = self.learning_repo.create(
                LearningProcess(
                    request_id=request_id,
                    user_id=request.user_id,
                    mentor_id=mentor_id,
                    status=LearningStatus.ACTIVE,
                    start_date=utcnow(),
                    plan=[],
                    notes=None,
                )
            )
        except Exception:
            if self._learning_exists(request_id):
                # A concurrent assignment created the process first; its
                # approval must stand.
                logger.warning(
                    "Concurrent assignment won the race",
                    extra={"context": {"request_id": request_id, "mentor_id": mentor_id}},
                )
                raise LearningAlreadyExistsError()
            if approved_here:
                self._revert_approval(request_id)
            raise

        try:
            self.mentor_service.increment_workload(mentor_id)
        except Exception:
            self._discard_learning(learning.id)
            if approved_here:
                self._revert_approval(request_id)
            raise

        self.metrics.learning_started()
        logger.info(
            "Mentor assigned",
            extra={
                "context": {
                    "learning_id": learning.id,
                    "request_id": request_id,
                    "mentor_id": mentor_id,
                    "user_id": request.user_id,
                }
            },
        )
        return learning

    def _learning_exists(self, request_id: int) -> bool:
        try:
            return self.learning_repo.get_by_request_id(request_id) is not None
        except Exception as e:
            logger.error(
                "Failed to look up learning process after insert error",
                extra={"context": {"request_id": request_id, "error": str(e)}},
                exc_info=True,
            )
            return False

    def _revert_approval(self, request_id: int) -> None:
        try:
            self.request_repo.update_status(
                request_id, RequestStatus.PENDING, expected_status=RequestStatus.APPROVED
            )
            self.metrics.request_status_changed(
                RequestStatus.APPROVED, RequestStatus.PENDING
            )
            logger.warning(
                "Request approval rolled back",
                extra={"context": {"request_id": request_id}},
            )
        except Exception as e:
            logger.error(
                "Failed to roll back request approval",
                extra={"context": {"request_id": request_id, "error": str(e)}},
                exc_info=True,
            )

    def _discard_learning(self, learning_id: int) -> None:
        try:
            self.learning_repo.delete(learning_id)
        except Exception as e:
            logger.error(
                "Failed to discard learning process",
                extra={"context": {"learning_id": learning_id, "error": str(e)}},
                exc_info=True,
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_learning(self, learning_id: int) -> LearningProcess:
        learning = self.learning_repo.get_by_id(learning_id)
        if learning is None:
            raise LearningNotFoundError()
        return learning

    def get_user_learnings(self, user_id: int) -> List[LearningProcess]:
        return self.learning_repo.get_by_user_id(user_id)

    def get_mentor_learnings(self, mentor_id: int) -> List[LearningProcess]:
        self.mentor_service.get_mentor(mentor_id)
        return self.learning_repo.get_by_mentor_id(mentor_id)

    def get_all_learnings(self) -> List[LearningProcess]:
        return self.learning_repo.get_all()

    def get_progress(self, learning_id: int) -> float:
        return self.get_learning(learning_id).progress()

    # ------------------------------------------------------------------
    # Plan and notes (active processes only)
    # ------------------------------------------------------------------

    def add_plan_item(self, learning_id: int, text: str) -> LearningProcess:
        learning = self.get_learning(learning_id)
        learning.add_plan_item((text or "").strip())
        return self._save_plan(learning)

    def update_plan_item(
        self, learning_id: int, item_id: int, text: Optional[str], completed: bool
    ) -> LearningProcess:
        learning = self.get_learning(learning_id)
        learning.update_plan_item(item_id, text, completed)
        return self._save_plan(learning)

    def toggle_plan_item(self, learning_id: int, item_id: int) -> LearningProcess:
        learning = self.get_learning(learning_id)
        learning.toggle_plan_item(item_id)
        return self._save_plan(learning)

    def remove_plan_item(self, learning_id: int, item_id: int) -> LearningProcess:
        learning = self.get_learning(learning_id)
        learning.remove_plan_item(item_id)
        return self._save_plan(learning)

    def update_plan(
        self, learning_id: int, items: List[Dict[str, Any]]
    ) -> LearningProcess:
        """Replace the whole plan.

        Items without an id get fresh ones after the highest supplied id.
        """
        learning = self.get_learning(learning_id)
        learning.ensure_active()
        learning.replace_plan(self._build_plan(items))
        return self._save_plan(learning)

    def update_notes(self, learning_id: int, notes: Optional[str]) -> LearningProcess:
        learning = self.get_learning(learning_id)
        learning.set_notes(notes)
        if not self.learning_repo.update_notes(learning.id, learning.notes):
            raise LearningNotActiveError()
        return self.get_learning(learning_id)

    def _save_plan(self, learning: LearningProcess) -> LearningProcess:
        # The write is guarded on status, so a completion that raced us wins
        if not self.learning_repo.update_plan(learning.id, learning.plan):
            raise LearningNotActiveError()
        return self.get_learning(learning.id)

    @staticmethod
    def _build_plan(items: List[Dict[str, Any]]) -> List[LearningPlanItem]:
        if not isinstance(items, list):
            raise InvalidInputError("plan must be a list of items")

        explicit_ids = [
            entry.get("id") for entry in items if isinstance(entry, dict) and entry.get("id")
        ]
        for item_id in explicit_ids:
            if not isinstance(item_id, int) or isinstance(item_id, bool) or item_id < 1:
                raise InvalidInputError("plan item id must be a positive integer")
        next_id = max(explicit_ids, default=0) + 1

        plan: List[LearningPlanItem] = []
        for entry in items:
            if not isinstance(entry, dict):
                raise InvalidInputError("plan items must be objects")
            item_id = entry.get("id")
            if not item_id:
                item_id = next_id
                next_id += 1
            text = entry.get("text")
            if not isinstance(text, str):
                raise InvalidInputError("plan item text cannot be empty")
            completed = entry.get("completed", False)
            if not isinstance(completed, bool):
                raise InvalidInputError("completed must be a boolean")
            plan.append(
                LearningPlanItem(
                    id=item_id,
                    text=text.strip(),
                    completed=completed,
                )
            )
        return plan

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def complete_learning(
        self, learning_id: int, rating: int, comment: str
    ) -> LearningProcess:
        """Terminal transition active -> completed, then release the mentor slot.

        Validation happens before any write, so an invalid rating leaves the
        process and the mentor untouched.
        """
        learning = self.get_learning(learning_id)
        feedback = learning.complete(rating, (comment or "").strip())

        if not self.learning_repo.complete(learning.id, feedback):
            raise LearningNotActiveError()

        self.mentor_service.decrement_workload(learning.mentor_id)
        self.metrics.learning_completed(feedback.rating)

        logger.info(
            "Learning process completed",
            extra={
                "context": {
                    "learning_id": learning.id,
                    "mentor_id": learning.mentor_id,
                    "rating": feedback.rating,
                }
            },
        )
        return self.get_learning(learning_id)

    # ------------------------------------------------------------------
    # Administrative override
    # ------------------------------------------------------------------

    def update_learning(self, learning_id: int, changes: Dict[str, Any]) -> LearningProcess:
        """Overwrite status, plan, notes and feedback without transition guards.

        Only the pairing of completed status with an end date and feedback
        is enforced. Mentor workload is not adjusted.
        """
        learning = self.get_learning(learning_id)

        status = changes.get("status", learning.status)
        if status not in LearningStatus.ALL:
            raise InvalidInputError(f"unknown learning status '{status}'")

        plan = learning.plan
        if "plan" in changes and changes["plan"] is not None:
            plan = self._build_plan(changes["plan"])

        notes = learning.notes
        if "notes" in changes:
            notes = changes["notes"] or None

        feedback = learning.feedback
        end_date = learning.end_date
        if status == LearningStatus.COMPLETED:
            raw_feedback = changes.get("feedback")
            if raw_feedback is not None:
                if not isinstance(raw_feedback, dict):
                    raise InvalidInputError("feedback must be an object")
                feedback = Feedback(
                    rating=raw_feedback.get("rating"),
                    comment=(raw_feedback.get("comment") or "").strip(),
                )
            if feedback is None:
                raise InvalidInputError("completed learning requires feedback")
            end_date = end_date or utcnow()
        else:
            feedback = None
            end_date = None

        updated = LearningProcess(
            id=learning.id,
            request_id=learning.request_id,
            user_id=learning.user_id,
            mentor_id=learning.mentor_id,
            status=status,
            start_date=learning.start_date,
            end_date=end_date,
            plan=plan,
            notes=notes,
            feedback=feedback,
            created_at=learning.created_at,
        )
        saved = self.learning_repo.update(updated)

        logger.warning(
            "Learning process overridden by admin",
            extra={
                "context": {
                    "learning_id": learning_id,
                    "from_status": learning.status,
                    "to_status": status,
                }
            },
        )
        return saved
