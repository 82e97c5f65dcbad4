from typing import List, Optional

from sqlalchemy import update

from mentorship.db.base import TrainingRequest as DbRequest
from mentorship.domain.entities import TrainingRequest as DomainRequest
from mentorship.domain.interfaces import IRequestRepository


class RequestRepository(IRequestRepository):
    """Training request persistence against the relational store."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def create(self, request: DomainRequest) -> DomainRequest:
        db_request = DbRequest(
            user_id=request.user_id,
            topic=request.topic,
            description=request.description,
            status=request.status,
        )

        self.db.add(db_request)
        self.db.commit()
        self.db.refresh(db_request)

        return self._to_domain(db_request)

    def get_by_id(self, request_id: int) -> Optional[DomainRequest]:
        db_request = self.db.query(DbRequest).filter_by(id=request_id).first()
        return self._to_domain(db_request) if db_request else None

    def get_by_user_id(self, user_id: int) -> List[DomainRequest]:
        db_requests = (
            self.db.query(DbRequest)
            .filter_by(user_id=user_id)
            .order_by(DbRequest.created_at.desc(), DbRequest.id.desc())
            .all()
        )
        return [self._to_domain(db_request) for db_request in db_requests]

    def get_all(self, status: Optional[str] = None) -> List[DomainRequest]:
        query = self.db.query(DbRequest)
        if status:
            query = query.filter_by(status=status)
        db_requests = query.order_by(DbRequest.created_at.desc(), DbRequest.id.desc()).all()
        return [self._to_domain(db_request) for db_request in db_requests]

    def update(self, request: DomainRequest) -> DomainRequest:
        """Persist topic and description; status is left untouched."""
        if not request.id:
            raise ValueError("Request ID is required for update")

        db_request = self.db.query(DbRequest).filter_by(id=request.id).first()
        if not db_request:
            raise ValueError(f"Request with ID {request.id} not found")

        db_request.topic = request.topic
        db_request.description = request.description

        self.db.add(db_request)
        self.db.commit()
        self.db.refresh(db_request)

        return self._to_domain(db_request)

    def update_status(
        self, request_id: int, status: str, expected_status: Optional[str] = None
    ) -> bool:
        stmt = update(DbRequest).where(DbRequest.id == request_id)
        if expected_status is not None:
            stmt = stmt.where(DbRequest.status == expected_status)
        result = self.db.execute(stmt.values(status=status))
        self.db.commit()
        return result.rowcount > 0

    def _to_domain(self, db_request: DbRequest) -> DomainRequest:
        """Convert database model to domain entity."""
        return DomainRequest(
            id=db_request.id,
            user_id=db_request.user_id,
            topic=db_request.topic,
            description=db_request.description,
            status=db_request.status,
            created_at=db_request.created_at,
            updated_at=db_request.updated_at,
        )
