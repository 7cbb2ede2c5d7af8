"""
Leave request policy.

Pure functions over lists of leave requests: submission validation, status
transitions, role-scoped visibility, review ordering and the calendar
membership query. Nothing here touches storage.
"""
import enum
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from app.core.exceptions import LeaveValidationError, StatusTransitionError
from app.models.leave_request import LeaveStatus
from app.models.user import UserRole
from app.schemas.auth import UserProfile
from app.schemas.leave import LeaveRequestRecord


class LeaveAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"


class LeaveView(str, enum.Enum):
    REVIEW = "review"      # admin/manager table
    PERSONAL = "personal"  # the user's own requests
    CALENDAR = "calendar"  # store-wide coverage


_TRANSITIONS = {
    (LeaveStatus.PENDING, LeaveAction.APPROVE): LeaveStatus.APPROVED,
    (LeaveStatus.PENDING, LeaveAction.REJECT): LeaveStatus.REJECTED,
    (LeaveStatus.APPROVED, LeaveAction.APPROVE): LeaveStatus.APPROVED,
    (LeaveStatus.REJECTED, LeaveAction.REJECT): LeaveStatus.REJECTED,
}


def transition(current: LeaveStatus, action: LeaveAction) -> LeaveStatus:
    """Return the status reached by applying `action`, or raise StatusTransitionError."""
    new_status = _TRANSITIONS.get((LeaveStatus(current), LeaveAction(action)))
    if new_status is None:
        raise StatusTransitionError(LeaveStatus(current).value, LeaveAction(action).value)
    return new_status


def build_leave_request(
    requester: Optional[UserProfile],
    start_date: Optional[date],
    end_date: Optional[date],
    reason: Optional[str],
    now: Optional[datetime] = None,
) -> LeaveRequestRecord:
    """
    Validate a submission and build the pending record for it.

    Raises LeaveValidationError without side effects when a field is missing,
    the requester has no identity or home store, or the range is inverted.
    Overlaps with the requester's existing requests are accepted.
    """
    clean_reason = (reason or "").strip()
    if start_date is None or end_date is None or not clean_reason:
        raise LeaveValidationError(
            "Please fill in all required fields.",
            details={"fields": ["start_date", "end_date", "reason"]},
        )

    if end_date < start_date:
        raise LeaveValidationError("The end date must be on or after the start date.")

    if requester is None or not requester.id or requester.store is None:
        raise LeaveValidationError("Missing user information.")

    return LeaveRequestRecord(
        id=f"new-{uuid.uuid4().hex}",
        user_id=requester.id,
        user_name=requester.name,
        store_id=requester.store.id,
        store_name=requester.store.name,
        start_date=start_date,
        end_date=end_date,
        reason=clean_reason,
        status=LeaveStatus.PENDING,
        created_at=now or datetime.now(timezone.utc),
    )


def visible_requests(
    user: Optional[UserProfile],
    requests: Iterable[LeaveRequestRecord],
    view: LeaveView = LeaveView.REVIEW,
    store_id: Optional[str] = None,
) -> List[LeaveRequestRecord]:
    """
    Filter `requests` down to what `user` may see in `view`.

    `store_id` is an explicit store selection and only narrows an admin's
    review or calendar view. Users without identity, or without a store where
    one is needed, see nothing.
    """
    if user is None or not user.id:
        return []

    if view == LeaveView.PERSONAL:
        return [r for r in requests if r.user_id == user.id]

    if user.role == UserRole.ADMIN:
        if store_id:
            return [r for r in requests if r.store_id == store_id]
        return list(requests)

    if view == LeaveView.REVIEW and user.role != UserRole.MANAGER:
        return []

    if not user.store_id:
        return []
    return [r for r in requests if r.store_id == user.store_id]


def sort_for_review(requests: Iterable[LeaveRequestRecord]) -> List[LeaveRequestRecord]:
    """Pending first, then newest `created_at` first within each partition."""
    by_created = sorted(requests, key=lambda r: r.created_at, reverse=True)
    # Stable sort: the created_at order survives inside each partition
    return sorted(by_created, key=lambda r: r.status != LeaveStatus.PENDING)


def requests_on_day(
    day: date,
    requests: Iterable[LeaveRequestRecord],
    store_id: Optional[str] = None,
) -> List[LeaveRequestRecord]:
    """Every request whose inclusive range covers `day`, optionally for one store."""
    return [
        r for r in requests
        if (not store_id or r.store_id == store_id) and r.start_date <= day <= r.end_date
    ]


def count_by_status(requests: Iterable[LeaveRequestRecord], status: LeaveStatus) -> int:
    return sum(1 for r in requests if r.status == status)
