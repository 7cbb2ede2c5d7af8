"""
LeaveRequestStore: the state container consumers hold by reference.

Mutations go through the repository and are announced to subscribers
synchronously after they are applied. No-ops are not announced.
"""
import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from app.core.exceptions import StatusTransitionError
from app.models.leave_request import LeaveStatus
from app.repositories.leave_repository import LeaveRepository
from app.schemas.auth import UserProfile
from app.schemas.leave import LeaveRequestRecord
from app.services.leave_policy import (
    LeaveAction,
    LeaveView,
    build_leave_request,
    count_by_status,
    requests_on_day,
    sort_for_review,
    transition,
    visible_requests,
)

logger = logging.getLogger(__name__)

Listener = Callable[[str, LeaveRequestRecord], None]


class LeaveRequestStore:
    def __init__(self, repository: LeaveRepository):
        self.repository = repository
        self._listeners: List[Listener] = []

    # --- subscription -----------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener(event, record)`; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, record: LeaveRequestRecord) -> None:
        for listener in list(self._listeners):
            listener(event, record)

    # --- mutations --------------------------------------------------------

    def create(
        self,
        requester: Optional[UserProfile],
        start_date: Optional[date],
        end_date: Optional[date],
        reason: Optional[str],
        now: Optional[datetime] = None,
    ) -> LeaveRequestRecord:
        record = build_leave_request(requester, start_date, end_date, reason, now=now)
        self.repository.add(record)
        self._notify("created", record)
        return record

    def approve(self, request_id: str) -> Optional[LeaveRequestRecord]:
        return self._resolve(request_id, LeaveAction.APPROVE)

    def reject(self, request_id: str) -> Optional[LeaveRequestRecord]:
        return self._resolve(request_id, LeaveAction.REJECT)

    def _resolve(self, request_id: str, action: LeaveAction) -> Optional[LeaveRequestRecord]:
        """Returns the updated record, or None when nothing changed."""
        current = self.repository.get(request_id)
        if current is None:
            logger.info(f"Ignoring {action.value} for unknown leave request {request_id}")
            return None

        try:
            new_status = transition(current.status, action)
        except StatusTransitionError:
            logger.info(f"Ignoring {action.value} for leave request {request_id}: already {current.status.value}")
            return None

        if new_status == current.status:
            return None

        updated = self.repository.set_status(request_id, new_status)
        if updated is not None:
            self._notify(new_status.value, updated)
        return updated

    # --- views ------------------------------------------------------------

    def all(self) -> List[LeaveRequestRecord]:
        return self.repository.list_all()

    def get(self, request_id: str) -> Optional[LeaveRequestRecord]:
        return self.repository.get(request_id)

    def review_list(self, user: Optional[UserProfile], store_id: Optional[str] = None) -> List[LeaveRequestRecord]:
        return sort_for_review(visible_requests(user, self.all(), LeaveView.REVIEW, store_id))

    def personal_list(self, user: Optional[UserProfile]) -> List[LeaveRequestRecord]:
        return visible_requests(user, self.all(), LeaveView.PERSONAL)

    def calendar_scope(self, user: Optional[UserProfile], store_id: Optional[str] = None) -> List[LeaveRequestRecord]:
        return visible_requests(user, self.all(), LeaveView.CALENDAR, store_id)

    def on_day(self, user: Optional[UserProfile], day: date, store_id: Optional[str] = None) -> List[LeaveRequestRecord]:
        return requests_on_day(day, self.calendar_scope(user, store_id))

    def pending_count(self, user: Optional[UserProfile]) -> int:
        return count_by_status(self.calendar_scope(user), LeaveStatus.PENDING)


def log_leave_event(event: str, record: LeaveRequestRecord) -> None:
    """Default subscriber: one structured log line per applied mutation."""
    logger.info(
        f"Leave request {event}",
        extra={"leave_id": record.id, "store_id": record.store_id, "status": record.status.value},
    )
