from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from mentorship.db.base import Mentor as DbMentor
from mentorship.domain.entities import Mentor as DomainMentor
from mentorship.domain.interfaces import IMentorRepository


class MentorRepository(IMentorRepository):
    """Mentor persistence.

    Workload changes are single guarded UPDATE statements; the affected row
    count tells the caller whether the change happened, so two concurrent
    assignments can never push a mentor past the limit.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def create(self, mentor: DomainMentor) -> DomainMentor:
        db_mentor = DbMentor(
            name=mentor.name,
            job_title=mentor.job_title,
            experience=mentor.experience,
            workload=mentor.workload,
            email=mentor.email,
            telegram=mentor.telegram,
        )

        self.db.add(db_mentor)
        self.db.commit()
        self.db.refresh(db_mentor)

        return self._to_domain(db_mentor)

    def get_by_id(self, mentor_id: int) -> Optional[DomainMentor]:
        db_mentor = self.db.query(DbMentor).filter_by(id=mentor_id).first()
        return self._to_domain(db_mentor) if db_mentor else None

    def get_all(self, max_workload: Optional[int] = None) -> List[DomainMentor]:
        query = self.db.query(DbMentor)
        if max_workload is not None:
            query = query.filter(DbMentor.workload <= max_workload)
        db_mentors = query.order_by(DbMentor.workload.asc(), DbMentor.name.asc()).all()
        return [self._to_domain(db_mentor) for db_mentor in db_mentors]

    def update(self, mentor: DomainMentor) -> DomainMentor:
        if not mentor.id:
            raise ValueError("Mentor ID is required for update")

        db_mentor = self.db.query(DbMentor).filter_by(id=mentor.id).first()
        if not db_mentor:
            raise ValueError(f"Mentor with ID {mentor.id} not found")

        db_mentor.name = mentor.name
        db_mentor.job_title = mentor.job_title
        db_mentor.experience = mentor.experience
        db_mentor.workload = mentor.workload
        db_mentor.email = mentor.email
        db_mentor.telegram = mentor.telegram

        self.db.add(db_mentor)
        self.db.commit()
        self.db.refresh(db_mentor)

        return self._to_domain(db_mentor)

    def delete(self, mentor_id: int) -> bool:
        db_mentor = self.db.query(DbMentor).filter_by(id=mentor_id).first()
        if not db_mentor:
            return False

        self.db.delete(db_mentor)
        self.db.commit()
        return True

    def try_increment_workload(self, mentor_id: int, limit: int) -> bool:
        try:
            result = self.db.execute(
                update(DbMentor)
                .where(DbMentor.id == mentor_id, DbMentor.workload < limit)
                .values(workload=DbMentor.workload + 1)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return result.rowcount == 1

    def decrement_workload(self, mentor_id: int) -> bool:
        result = self.db.execute(
            update(DbMentor)
            .where(DbMentor.id == mentor_id, DbMentor.workload > 0)
            .values(workload=DbMentor.workload - 1)
        )
        self.db.commit()
        return result.rowcount == 1

    def _to_domain(self, db_mentor: DbMentor) -> DomainMentor:
        """Convert database model to domain entity."""
        return DomainMentor(
            id=db_mentor.id,
            name=db_mentor.name,
            job_title=db_mentor.job_title,
            email=db_mentor.email,
            experience=db_mentor.experience,
            telegram=db_mentor.telegram,
            workload=db_mentor.workload or 0,
            created_at=db_mentor.created_at,
            updated_at=db_mentor.updated_at,
        )
