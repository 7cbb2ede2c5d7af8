from typing import List, Optional
from fastapi import APIRouter, Depends
from app.core.exceptions import AccessDeniedError
from app.routers.auth_deps import get_leave_store, require_approver
from app.routers.leave import present
from app.schemas.auth import UserProfile
from app.schemas.leave import LeaveActionResult, LeaveRequestResponse
from app.services.leave_policy import LeaveView, visible_requests
from app.services.leave_store import LeaveRequestStore
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leave", tags=["leave-manager"])


# Review table: pending first, newest first
@router.get("/requests", response_model=List[LeaveRequestResponse])
def review_requests(
    store_id: Optional[str] = None,
    profile: UserProfile = Depends(require_approver()),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    return [present(r) for r in store.review_list(profile, store_id)]


def _resolve(request_id: str, approve: bool, profile: UserProfile, store: LeaveRequestStore) -> LeaveActionResult:
    current = store.get(request_id)
    if current is None:
        return LeaveActionResult(changed=False)

    if not visible_requests(profile, [current], LeaveView.REVIEW):
        logger.warning(f"User {profile.id} tried to resolve leave request {request_id} outside their store")
        raise AccessDeniedError("You can only manage leave requests of your own store.")

    updated = store.approve(request_id) if approve else store.reject(request_id)
    if updated is None:
        return LeaveActionResult(changed=False, leave_status=current.status)
    return LeaveActionResult(changed=True, leave_status=updated.status)


@router.put("/requests/{request_id}/approve", response_model=LeaveActionResult)
def approve_request(
    request_id: str,
    profile: UserProfile = Depends(require_approver()),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    return _resolve(request_id, True, profile, store)


@router.put("/requests/{request_id}/reject", response_model=LeaveActionResult)
def reject_request(
    request_id: str,
    profile: UserProfile = Depends(require_approver()),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    return _resolve(request_id, False, profile, store)
