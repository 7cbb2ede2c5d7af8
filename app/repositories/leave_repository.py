"""
Leave request storage.

`LeaveRepository` is the seam between the policy/store layer and persistence.
`InMemoryLeaveRepository` backs tests and demos; `SqlLeaveRepository` is the
SQLAlchemy-backed production implementation.
"""
import logging
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session

from app.models.leave_request import LeaveRequest, LeaveStatus
from app.schemas.leave import LeaveRequestRecord

logger = logging.getLogger(__name__)


class LeaveRepository(Protocol):
    def list_all(self) -> List[LeaveRequestRecord]:
        """All requests, newest insertion first."""
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[LeaveRequestRecord]:
        raise NotImplementedError

    def add(self, record: LeaveRequestRecord) -> LeaveRequestRecord:
        raise NotImplementedError

    def set_status(self, request_id: str, status: LeaveStatus) -> Optional[LeaveRequestRecord]:
        """Persist a new status; None when the id is unknown."""
        raise NotImplementedError


class InMemoryLeaveRepository:
    def __init__(self, records: Optional[List[LeaveRequestRecord]] = None):
        self._records: List[LeaveRequestRecord] = list(records or [])

    def list_all(self) -> List[LeaveRequestRecord]:
        return list(self._records)

    def get(self, request_id: str) -> Optional[LeaveRequestRecord]:
        return next((r for r in self._records if r.id == request_id), None)

    def add(self, record: LeaveRequestRecord) -> LeaveRequestRecord:
        if self.get(record.id) is not None:
            raise ValueError(f"Duplicate leave request id: {record.id}")
        self._records.insert(0, record)
        return record

    def set_status(self, request_id: str, status: LeaveStatus) -> Optional[LeaveRequestRecord]:
        for index, record in enumerate(self._records):
            if record.id == request_id:
                updated = record.model_copy(update={"status": status})
                self._records[index] = updated
                return updated
        return None


class SqlLeaveRepository:
    """Commits once per mutation; rolls back and re-raises on failure."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[LeaveRequestRecord]:
        rows = self.db.query(LeaveRequest).order_by(LeaveRequest.seq.desc()).all()
        return [LeaveRequestRecord.model_validate(row) for row in rows]

    def get(self, request_id: str) -> Optional[LeaveRequestRecord]:
        row = self.db.query(LeaveRequest).filter(LeaveRequest.id == request_id).first()
        return LeaveRequestRecord.model_validate(row) if row else None

    def add(self, record: LeaveRequestRecord) -> LeaveRequestRecord:
        row = LeaveRequest(**record.model_dump(mode="python"))
        row.status = record.status.value
        try:
            self.db.add(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Failed to store leave request {record.id}", exc_info=True)
            raise
        return record

    def set_status(self, request_id: str, status: LeaveStatus) -> Optional[LeaveRequestRecord]:
        row = self.db.query(LeaveRequest).filter(LeaveRequest.id == request_id).first()
        if not row:
            return None
        try:
            row.status = LeaveStatus(status).value
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Failed to update leave request {request_id}", exc_info=True)
            raise
        self.db.refresh(row)
        return LeaveRequestRecord.model_validate(row)
