import logging
from typing import List, Optional

from mentorship.core.exceptions import (
    InvalidWorkloadError,
    MentorHasLearningsError,
    MentorNotAvailableError,
    MentorNotFoundError,
)
from mentorship.core.metrics import MetricsSink, NullMetricsSink
from mentorship.domain.entities import MAX_MENTOR_WORKLOAD
from mentorship.domain.entities import Mentor as DomainMentor
from mentorship.domain.interfaces import ILearningRepository, IMentorRepository

logger = logging.getLogger(__name__)


class MentorService:
    """Mentor management and the workload counter.

    Workload stays within 0..5. Increments and decrements go through the
    repository's guarded single-statement updates.
    """

    def __init__(
        self,
        repo: IMentorRepository,
        learning_repo: Optional[ILearningRepository] = None,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        self.repo = repo
        self.learning_repo = learning_repo
        self.metrics = metrics or NullMetricsSink()

    def create_mentor(
        self,
        name: str,
        job_title: str,
        email: str,
        experience: Optional[str] = None,
        telegram: Optional[str] = None,
    ) -> DomainMentor:
        mentor = DomainMentor(
            name=(name or "").strip(),
            job_title=(job_title or "").strip(),
            email=(email or "").strip(),
            experience=experience or None,
            telegram=telegram or None,
            workload=0,
        )
        created = self.repo.create(mentor)
        self.metrics.mentor_workload(created.id, created.name, created.workload)

        logger.info("Mentor created", extra={"context": {"mentor_id": created.id}})
        return created

    def get_mentor(self, mentor_id: int) -> DomainMentor:
        mentor = self.repo.get_by_id(mentor_id)
        if mentor is None:
            raise MentorNotFoundError()
        return mentor

    def get_all_mentors(self) -> List[DomainMentor]:
        return self.repo.get_all()

    def get_available_mentors(self) -> List[DomainMentor]:
        """Mentors with room for one more student, least loaded first."""
        return self.repo.get_all(max_workload=MAX_MENTOR_WORKLOAD - 1)

    def update_mentor(
        self,
        mentor_id: int,
        name: str,
        job_title: str,
        email: str,
        experience: Optional[str] = None,
        telegram: Optional[str] = None,
        workload: Optional[int] = None,
    ) -> DomainMentor:
        """Administrative full update, including a direct workload override."""
        current = self.get_mentor(mentor_id)
        if workload is None:
            workload = current.workload
        if not isinstance(workload, int) or isinstance(workload, bool):
            raise InvalidWorkloadError()

        mentor = DomainMentor(
            id=mentor_id,
            name=(name or "").strip(),
            job_title=(job_title or "").strip(),
            email=(email or "").strip(),
            experience=experience or None,
            telegram=telegram or None,
            workload=workload,
            created_at=current.created_at,
        )
        saved = self.repo.update(mentor)
        self.metrics.mentor_workload(saved.id, saved.name, saved.workload)

        if saved.workload != current.workload:
            logger.warning(
                "Mentor workload overridden",
                extra={
                    "context": {
                        "mentor_id": mentor_id,
                        "from": current.workload,
                        "to": saved.workload,
                    }
                },
            )
        return saved

    def delete_mentor(self, mentor_id: int) -> None:
        self.get_mentor(mentor_id)
        if self.learning_repo is not None and self.learning_repo.get_by_mentor_id(mentor_id):
            raise MentorHasLearningsError()
        self.repo.delete(mentor_id)
        logger.info("Mentor deleted", extra={"context": {"mentor_id": mentor_id}})

    def increment_workload(self, mentor_id: int) -> DomainMentor:
        """Take one more student.

        Raises:
            MentorNotFoundError: Unknown mentor
            MentorNotAvailableError: Mentor already at the limit (unchanged)
        """
        if not self.repo.try_increment_workload(mentor_id, MAX_MENTOR_WORKLOAD):
            self.get_mentor(mentor_id)
            raise MentorNotAvailableError()
        mentor = self.get_mentor(mentor_id)
        self.metrics.mentor_workload(mentor.id, mentor.name, mentor.workload)
        return mentor

    def decrement_workload(self, mentor_id: int) -> DomainMentor:
        """Release one student; the counter never goes below zero."""
        if not self.repo.decrement_workload(mentor_id):
            mentor = self.get_mentor(mentor_id)
            logger.warning(
                "Mentor workload already at zero",
                extra={"context": {"mentor_id": mentor_id}},
            )
            return mentor
        mentor = self.get_mentor(mentor_id)
        self.metrics.mentor_workload(mentor.id, mentor.name, mentor.workload)
        return mentor
