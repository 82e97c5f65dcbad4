import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from mentorship.db.base import LearningProcess as DbLearning
from mentorship.domain.entities import (
    Feedback,
    LearningPlanItem,
    LearningProcess as DomainLearning,
    LearningStatus,
    utcnow,
)
from mentorship.domain.interfaces import ILearningRepository

logger = logging.getLogger(__name__)


def plan_to_json(plan: List[LearningPlanItem]) -> List[Dict[str, Any]]:
    """Serialize plan items for the JSON column."""
    return [
        {"id": item.id, "text": item.text, "completed": bool(item.completed)}
        for item in plan
    ]


def plan_from_json(raw: Optional[List[Dict[str, Any]]]) -> List[LearningPlanItem]:
    if not raw:
        return []
    return [
        LearningPlanItem(
            id=int(entry["id"]),
            text=entry.get("text", ""),
            completed=bool(entry.get("completed", False)),
        )
        for entry in raw
    ]


class LearningRepository(ILearningRepository):
    """Learning process persistence.

    The plan lives in one JSON column and is rewritten whole on every
    change. Writes that must only apply to an active process are guarded
    in the WHERE clause.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def create(self, learning: DomainLearning) -> DomainLearning:
        db_learning = DbLearning(
            request_id=learning.request_id,
            user_id=learning.user_id,
            mentor_id=learning.mentor_id,
            status=learning.status,
            start_date=learning.start_date or utcnow(),
            end_date=learning.end_date,
            plan=plan_to_json(learning.plan),
            notes=learning.notes,
            feedback_rating=learning.feedback.rating if learning.feedback else None,
            feedback_comment=learning.feedback.comment if learning.feedback else None,
        )

        try:
            self.db.add(db_learning)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Error creating learning process",
                extra={"context": {"request_id": learning.request_id, "error": str(e)}},
                exc_info=True,
            )
            raise
        self.db.refresh(db_learning)

        return self._to_domain(db_learning)

    def get_by_id(self, learning_id: int) -> Optional[DomainLearning]:
        db_learning = self.db.query(DbLearning).filter_by(id=learning_id).first()
        return self._to_domain(db_learning) if db_learning else None

    def get_by_request_id(self, request_id: int) -> Optional[DomainLearning]:
        db_learning = self.db.query(DbLearning).filter_by(request_id=request_id).first()
        return self._to_domain(db_learning) if db_learning else None

    def get_by_user_id(self, user_id: int) -> List[DomainLearning]:
        db_learnings = (
            self.db.query(DbLearning)
            .filter_by(user_id=user_id)
            .order_by(DbLearning.start_date.desc(), DbLearning.id.desc())
            .all()
        )
        return [self._to_domain(db_learning) for db_learning in db_learnings]

    def get_by_mentor_id(self, mentor_id: int) -> List[DomainLearning]:
        db_learnings = (
            self.db.query(DbLearning)
            .filter_by(mentor_id=mentor_id)
            .order_by(DbLearning.start_date.desc(), DbLearning.id.desc())
            .all()
        )
        return [self._to_domain(db_learning) for db_learning in db_learnings]

    def get_all(self) -> List[DomainLearning]:
        db_learnings = (
            self.db.query(DbLearning)
            .order_by(DbLearning.start_date.desc(), DbLearning.id.desc())
            .all()
        )
        return [self._to_domain(db_learning) for db_learning in db_learnings]

    def count_by_status(self, status: str) -> int:
        return self.db.query(DbLearning).filter_by(status=status).count()

    def delete(self, learning_id: int) -> bool:
        db_learning = self.db.query(DbLearning).filter_by(id=learning_id).first()
        if not db_learning:
            return False

        self.db.delete(db_learning)
        self.db.commit()
        return True

    def update_plan(self, learning_id: int, plan: List[LearningPlanItem]) -> bool:
        result = self.db.execute(
            update(DbLearning)
            .where(
                DbLearning.id == learning_id,
                DbLearning.status == LearningStatus.ACTIVE,
            )
            .values(plan=plan_to_json(plan), updated_at=utcnow())
        )
        self.db.commit()
        return result.rowcount == 1

    def update_notes(self, learning_id: int, notes: Optional[str]) -> bool:
        result = self.db.execute(
            update(DbLearning)
            .where(
                DbLearning.id == learning_id,
                DbLearning.status == LearningStatus.ACTIVE,
            )
            .values(notes=notes, updated_at=utcnow())
        )
        self.db.commit()
        return result.rowcount == 1

    def complete(self, learning_id: int, feedback: Feedback) -> bool:
        now = utcnow()
        result = self.db.execute(
            update(DbLearning)
            .where(
                DbLearning.id == learning_id,
                DbLearning.status == LearningStatus.ACTIVE,
            )
            .values(
                status=LearningStatus.COMPLETED,
                end_date=now,
                feedback_rating=feedback.rating,
                feedback_comment=feedback.comment,
                updated_at=now,
            )
        )
        self.db.commit()
        return result.rowcount == 1

    def update(self, learning: DomainLearning) -> DomainLearning:
        """Overwrite every mutable column from the domain entity."""
        if not learning.id:
            raise ValueError("Learning ID is required for update")

        db_learning = self.db.query(DbLearning).filter_by(id=learning.id).first()
        if not db_learning:
            raise ValueError(f"Learning process with ID {learning.id} not found")

        db_learning.mentor_id = learning.mentor_id
        db_learning.status = learning.status
        db_learning.end_date = learning.end_date
        db_learning.plan = plan_to_json(learning.plan)
        db_learning.notes = learning.notes
        db_learning.feedback_rating = learning.feedback.rating if learning.feedback else None
        db_learning.feedback_comment = (
            learning.feedback.comment if learning.feedback else None
        )

        self.db.add(db_learning)
        self.db.commit()
        self.db.refresh(db_learning)

        return self._to_domain(db_learning)

    def _to_domain(self, db_learning: DbLearning) -> DomainLearning:
        """Convert database model to domain entity."""
        feedback = None
        if db_learning.feedback_rating is not None:
            feedback = Feedback(
                rating=db_learning.feedback_rating,
                comment=db_learning.feedback_comment or "",
            )

        return DomainLearning(
            id=db_learning.id,
            request_id=db_learning.request_id,
            user_id=db_learning.user_id,
            mentor_id=db_learning.mentor_id,
            status=db_learning.status,
            start_date=db_learning.start_date,
            end_date=db_learning.end_date,
            plan=plan_from_json(db_learning.plan),
            notes=db_learning.notes,
            feedback=feedback,
            created_at=db_learning.created_at,
            updated_at=db_learning.updated_at,
        )
