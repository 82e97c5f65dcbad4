"""
Unit tests for RequestService: creation and the one-way status machine.
"""

import pytest

from mentorship.core.exceptions import (
    InvalidInputError,
    InvalidRequestTransitionError,
    RequestAlreadyApprovedError,
    RequestAlreadyRejectedError,
    RequestNotFoundError,
    UserNotFoundError,
)
from mentorship.core.metrics import RecordingMetricsSink
from mentorship.domain.entities import TrainingRequest as DomainRequest
from mentorship.domain.entities import User as DomainUser
from mentorship.services.request_service import RequestService
from tests.factories.repository_factories import (
    RequestRepositoryFactory,
    UserRepositoryFactory,
)


@pytest.fixture
def mock_repo():
    return RequestRepositoryFactory.create_mock_full()


@pytest.fixture
def user_repo():
    repo = UserRepositoryFactory.create_mock_reader()
    repo.get_by_id.return_value = DomainUser(id=1, name="Alice", email="alice@corp.com")
    return repo


@pytest.fixture
def metrics():
    return RecordingMetricsSink()


@pytest.fixture
def service(mock_repo, user_repo, metrics):
    return RequestService(mock_repo, user_repo, metrics)


def make_request(status="pending", **overrides):
    values = dict(id=10, user_id=1, topic="Go", description="basics", status=status)
    values.update(overrides)
    return DomainRequest(**values)


@pytest.mark.unit
@pytest.mark.services
class TestCreateRequest:
    def test_new_request_is_pending(self, service, mock_repo, metrics):
        created = service.create_request(1, " Go ", "basics")

        assert created.status == "pending"
        assert created.topic == "Go"
        mock_repo.create.assert_called_once()
        assert metrics.events == [("request_created", ("pending",))]

    def test_requires_topic_and_description(self, service, mock_repo):
        with pytest.raises(InvalidInputError):
            service.create_request(1, "Go", "  ")
        mock_repo.create.assert_not_called()

    def test_unknown_user(self, service, user_repo):
        user_repo.get_by_id.return_value = None
        with pytest.raises(UserNotFoundError):
            service.create_request(99, "Go", "basics")

    def test_unknown_status_filter(self, service):
        with pytest.raises(InvalidInputError):
            service.get_all_requests(status="archived")


@pytest.mark.unit
@pytest.mark.services
class TestRequestTransitions:
    def test_approve_pending(self, service, mock_repo, metrics):
        mock_repo.get_by_id.return_value = make_request()

        approved = service.approve_request(10)

        assert approved.status == "approved"
        mock_repo.update_status.assert_called_once_with(
            10, "approved", expected_status="pending"
        )
        assert metrics.events == [("request_status_changed", ("pending", "approved"))]

    def test_reject_pending(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_request()
        assert service.reject_request(10).status == "rejected"

    def test_approve_twice(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_request("approved")
        with pytest.raises(RequestAlreadyApprovedError):
            service.approve_request(10)
        mock_repo.update_status.assert_not_called()

    def test_reject_twice(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_request("rejected")
        with pytest.raises(RequestAlreadyRejectedError):
            service.reject_request(10)

    @pytest.mark.parametrize(
        "status, action",
        [("rejected", "approve_request"), ("approved", "reject_request")],
    )
    def test_terminal_states_cannot_cross(self, service, mock_repo, status, action):
        mock_repo.get_by_id.return_value = make_request(status)
        with pytest.raises(InvalidRequestTransitionError):
            getattr(service, action)(10)

    def test_lost_race_reports_current_state(self, service, mock_repo, metrics):
        mock_repo.get_by_id.side_effect = [make_request(), make_request("approved")]
        mock_repo.update_status.return_value = False

        with pytest.raises(RequestAlreadyApprovedError):
            service.approve_request(10)
        assert metrics.events == []

    def test_missing_request(self, service):
        with pytest.raises(RequestNotFoundError):
            service.approve_request(404)


@pytest.mark.unit
@pytest.mark.services
class TestUpdateRequest:
    def test_update_keeps_status(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_request("approved")

        updated = service.update_request(10, topic="Rust")

        assert updated.topic == "Rust"
        assert updated.description == "basics"
        assert updated.status == "approved"

    def test_empty_topic_is_rejected(self, service, mock_repo):
        mock_repo.get_by_id.return_value = make_request()
        with pytest.raises(InvalidInputError):
            service.update_request(10, topic="  ")
        mock_repo.update.assert_not_called()
