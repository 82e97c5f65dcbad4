"""
Unit tests for MentorService and the workload counter.
"""

import pytest

from mentorship.core.exceptions import (
    InvalidInputError,
    InvalidWorkloadError,
    MentorHasLearningsError,
    MentorNotAvailableError,
    MentorNotFoundError,
)
from mentorship.core.metrics import RecordingMetricsSink
from mentorship.domain.entities import LearningProcess
from mentorship.domain.entities import Mentor as DomainMentor
from mentorship.services.mentor_service import MentorService
from tests.factories.repository_factories import (
    LearningRepositoryFactory,
    MentorRepositoryFactory,
)


@pytest.fixture
def mock_repo():
    return MentorRepositoryFactory.create_mock_full()


@pytest.fixture
def learning_repo():
    return LearningRepositoryFactory.create_mock_full()


@pytest.fixture
def metrics():
    return RecordingMetricsSink()


@pytest.fixture
def service(mock_repo, learning_repo, metrics):
    return MentorService(mock_repo, learning_repo, metrics)


def make_mentor(workload=0):
    return DomainMentor(
        id=3, name="Bob", job_title="Staff Engineer", email="bob@corp.com", workload=workload
    )


@pytest.mark.unit
@pytest.mark.services
class TestMentorManagement:
    def test_create_starts_with_zero_workload(self, service, mock_repo, metrics):
        mock_repo.create.side_effect = lambda m: DomainMentor(
            id=3, name=m.name, job_title=m.job_title, email=m.email, workload=m.workload
        )

        mentor = service.create_mentor("Bob", "Staff Engineer", "bob@corp.com")

        assert mentor.workload == 0
        assert metrics.events == [("mentor_workload", (3, "Bob", 0))]

    def test_create_requires_job_title(self, service):
        with pytest.raises(InvalidInputError):
            service.create_mentor("Bob", "", "bob@corp.com")

    def test_available_mentors_filter(self, service, mock_repo):
        service.get_available_mentors()
        mock_repo.get_all.assert_called_once_with(max_workload=4)

    def test_update_keeps_workload_when_omitted(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_mentor(workload=2)

        updated = service.update_mentor(3, "Bobby", "Principal", "bob@corp.com")

        assert updated.workload == 2
        assert updated.name == "Bobby"

    def test_update_rejects_workload_out_of_range(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_mentor()
        with pytest.raises(InvalidWorkloadError):
            service.update_mentor(3, "Bob", "Staff", "bob@corp.com", workload=6)
        mock_repo.update.assert_not_called()

    def test_delete_mentor_with_learnings(self, service, mock_repo, learning_repo):
        mock_repo.get_by_id.return_value = make_mentor(workload=1)
        learning_repo.get_by_mentor_id.return_value = [
            LearningProcess(id=1, request_id=1, user_id=1, mentor_id=3)
        ]

        with pytest.raises(MentorHasLearningsError):
            service.delete_mentor(3)
        mock_repo.delete.assert_not_called()

    def test_delete_missing_mentor(self, service):
        with pytest.raises(MentorNotFoundError):
            service.delete_mentor(3)


@pytest.mark.unit
@pytest.mark.services
class TestWorkload:
    def test_increment(self, service, mock_repo, metrics):
        mock_repo.get_by_id.return_value = make_mentor(workload=1)

        mentor = service.increment_workload(3)

        mock_repo.try_increment_workload.assert_called_once_with(3, 5)
        assert mentor.workload == 1
        assert metrics.names() == ["mentor_workload"]

    def test_increment_at_limit(self, service, mock_repo, metrics):
        mock_repo.try_increment_workload.return_value = False
        mock_repo.get_by_id.return_value = make_mentor(workload=5)

        with pytest.raises(MentorNotAvailableError):
            service.increment_workload(3)
        assert metrics.events == []

    def test_increment_unknown_mentor(self, service, mock_repo):
        mock_repo.try_increment_workload.return_value = False
        with pytest.raises(MentorNotFoundError):
            service.increment_workload(3)

    def test_decrement_at_zero_is_a_no_op(self, service, mock_repo):
        mock_repo.decrement_workload.return_value = False
        mock_repo.get_by_id.return_value = make_mentor(workload=0)

        assert service.decrement_workload(3).workload == 0
