"""
Unit tests for domain entities: validation rules and the learning process
state machine.
"""

import pytest

from mentorship.core.exceptions import (
    InvalidEmailError,
    InvalidInputError,
    InvalidRatingError,
    InvalidWorkloadError,
    LearningNotActiveError,
    PlanItemNotFoundError,
    PlanLimitReachedError,
)
from mentorship.domain.entities import (
    MAX_PLAN_ITEMS,
    Feedback,
    LearningPlanItem,
    LearningProcess,
    LearningStatus,
    Mentor,
    TrainingRequest,
    User,
)


def make_learning(**overrides) -> LearningProcess:
    values = dict(id=1, request_id=1, user_id=1, mentor_id=1)
    values.update(overrides)
    return LearningProcess(**values)


class TestUser:
    def test_defaults_to_employee(self):
        user = User(name="Alice", email="alice@corp.com")
        assert user.is_employee
        assert not user.is_admin

    def test_rejects_email_without_at(self):
        with pytest.raises(InvalidEmailError):
            User(name="Alice", email="alice.corp.com")

    def test_rejects_unknown_role(self):
        with pytest.raises(InvalidInputError):
            User(name="Alice", email="alice@corp.com", role="superuser")


class TestMentor:
    @pytest.mark.parametrize("workload", [-1, 6])
    def test_workload_outside_range_is_rejected(self, workload):
        with pytest.raises(InvalidWorkloadError):
            Mentor(name="Bob", job_title="Lead", email="bob@corp.com", workload=workload)

    def test_can_take_student_up_to_four(self):
        mentor = Mentor(name="Bob", job_title="Lead", email="bob@corp.com", workload=4)
        assert mentor.can_take_student()
        mentor.workload = 5
        assert not mentor.can_take_student()
        assert not mentor.is_available


class TestTrainingRequest:
    def test_new_request_is_pending(self):
        request = TrainingRequest(user_id=1, topic="Go", description="basics")
        assert request.is_pending

    def test_requires_topic(self):
        with pytest.raises(InvalidInputError):
            TrainingRequest(user_id=1, topic="  ", description="basics")


class TestFeedback:
    @pytest.mark.parametrize("rating", [0, 6, "5", True, None])
    def test_rating_must_be_int_between_one_and_five(self, rating):
        with pytest.raises(InvalidRatingError):
            Feedback(rating=rating, comment="ok")

    def test_comment_required(self):
        with pytest.raises(InvalidInputError):
            Feedback(rating=3, comment="")


class TestLearningPlan:
    def test_add_assigns_max_plus_one(self):
        learning = make_learning(
            plan=[LearningPlanItem(id=1, text="a"), LearningPlanItem(id=7, text="b")]
        )
        item = learning.add_plan_item("c")
        assert item.id == 8
        assert [i.id for i in learning.plan] == [1, 7, 8]

    def test_add_rejects_empty_text(self):
        learning = make_learning()
        with pytest.raises(InvalidInputError):
            learning.add_plan_item("   ")
        assert learning.plan == []

    def test_limit_reached_by_item_count(self):
        learning = make_learning(
            plan=[LearningPlanItem(id=i, text=f"t{i}") for i in range(1, MAX_PLAN_ITEMS + 1)]
        )
        with pytest.raises(PlanLimitReachedError):
            learning.add_plan_item("one too many")

    def test_limit_reached_by_id(self):
        learning = make_learning(plan=[LearningPlanItem(id=MAX_PLAN_ITEMS, text="last")])
        with pytest.raises(PlanLimitReachedError):
            learning.add_plan_item("next")

    def test_update_with_empty_text_keeps_text(self):
        learning = make_learning(plan=[LearningPlanItem(id=1, text="read docs")])
        item = learning.update_plan_item(1, "", True)
        assert item.text == "read docs"
        assert item.completed is True

    def test_unknown_item_raises(self):
        learning = make_learning()
        with pytest.raises(PlanItemNotFoundError):
            learning.toggle_plan_item(42)

    def test_toggle_pairs_restore_state(self):
        learning = make_learning()
        for text in ("a", "b", "c"):
            learning.add_plan_item(text)
        for item in list(learning.plan):
            learning.toggle_plan_item(item.id)
        learning.toggle_plan_item(2)
        learning.toggle_plan_item(2)
        assert [i.completed for i in learning.plan] == [True, True, True]
        learning.toggle_plan_item(1)
        assert [i.completed for i in learning.plan] == [False, True, True]

    def test_replace_rejects_duplicate_ids(self):
        learning = make_learning()
        with pytest.raises(InvalidInputError):
            learning.replace_plan(
                [LearningPlanItem(id=1, text="a"), LearningPlanItem(id=1, text="b")]
            )

    def test_empty_notes_become_none(self):
        learning = make_learning(notes="something")
        learning.set_notes("")
        assert learning.notes is None


class TestLearningProgress:
    def test_empty_plan_is_zero(self):
        assert make_learning().progress() == 0.0

    def test_one_of_three(self):
        learning = make_learning(
            plan=[
                LearningPlanItem(id=1, text="a"),
                LearningPlanItem(id=2, text="b", completed=True),
                LearningPlanItem(id=3, text="c"),
            ]
        )
        assert learning.progress() == pytest.approx(100 / 3)


class TestLearningCompletion:
    def test_complete_sets_feedback_and_end_date(self):
        learning = make_learning()
        feedback = learning.complete(5, "great")

        assert learning.status == LearningStatus.COMPLETED
        assert learning.feedback == feedback
        assert learning.end_date is not None

    def test_invalid_rating_leaves_process_active(self):
        learning = make_learning()
        with pytest.raises(InvalidRatingError):
            learning.complete(9, "great")
        assert learning.is_active
        assert learning.feedback is None
        assert learning.end_date is None

    def test_completed_process_rejects_mutations(self):
        learning = make_learning(plan=[LearningPlanItem(id=1, text="a")])
        learning.complete(4, "good")

        with pytest.raises(LearningNotActiveError):
            learning.add_plan_item("more")
        with pytest.raises(LearningNotActiveError):
            learning.toggle_plan_item(1)
        with pytest.raises(LearningNotActiveError):
            learning.set_notes("late note")
        with pytest.raises(LearningNotActiveError):
            learning.complete(5, "again")
        assert learning.plan[0].completed is False
