from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.exceptions import LeaveValidationError
from app.database import get_db
from app.models.leave_request import LeaveStatus
from app.models.user import User, UserRole
from app.routers.auth_deps import get_current_profile, get_leave_store
from app.schemas.auth import UserProfile
from app.schemas.leave import (
    CalendarDay,
    CalendarMonth,
    LeaveRequestCreate,
    LeaveRequestRecord,
    LeaveRequestResponse,
    LeaveSummary,
)
from app.services.calendar import build_month, format_date_range, parse_month
from app.services.leave_policy import count_by_status
from app.services.leave_store import LeaveRequestStore
from app.services.store_directory import list_stores

router = APIRouter(
    prefix="/leave",
    tags=["leave"]
)


def present(record: LeaveRequestRecord) -> LeaveRequestResponse:
    return LeaveRequestResponse(
        **record.model_dump(),
        period_label=format_date_range(record.start_date, record.end_date),
    )


@router.post("/requests", response_model=LeaveRequestResponse)
def submit_leave_request(
    request: LeaveRequestCreate,
    profile: UserProfile = Depends(get_current_profile),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    record = store.create(profile, request.start_date, request.end_date, request.reason)
    return present(record)


@router.get("/requests/mine", response_model=List[LeaveRequestResponse])
def list_my_requests(
    profile: UserProfile = Depends(get_current_profile),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    return [present(r) for r in store.personal_list(profile)]


@router.get("/calendar", response_model=CalendarMonth)
def leave_calendar(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM, defaults to the current month"),
    store_id: Optional[str] = None,
    profile: UserProfile = Depends(get_current_profile),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    scoped = store.calendar_scope(profile, store_id)
    try:
        first_day = parse_month(month) if month else date.today().replace(day=1)
        grid = build_month(first_day, scoped)
    except (ValueError, OverflowError):
        # Out-of-range months (e.g. 0000-01, 9999-12) cannot be laid out
        raise LeaveValidationError(f"Invalid month: {month}")

    days = [
        CalendarDay(day=day, in_month=in_month, requests=[present(r) for r in requests])
        for day, in_month, requests in grid
    ]
    return CalendarMonth(month=first_day.strftime("%Y-%m"), store_id=store_id, days=days)


@router.get("/calendar/day", response_model=List[LeaveRequestResponse])
def leave_on_day(
    day: date,
    store_id: Optional[str] = None,
    profile: UserProfile = Depends(get_current_profile),
    store: LeaveRequestStore = Depends(get_leave_store),
):
    return [present(r) for r in store.on_day(profile, day, store_id)]


@router.get("/summary", response_model=LeaveSummary)
def leave_summary(
    profile: UserProfile = Depends(get_current_profile),
    store: LeaveRequestStore = Depends(get_leave_store),
    db: Session = Depends(get_db),
):
    mine = store.personal_list(profile)

    employees = db.query(User).filter(User.role == UserRole.EMPLOYEE, User.is_active == True)  # noqa: E712
    if profile.role != UserRole.ADMIN:
        employees = employees.filter(User.store_id == profile.store_id) if profile.store_id else None

    return LeaveSummary(
        my_approved=count_by_status(mine, LeaveStatus.APPROVED),
        my_pending=count_by_status(mine, LeaveStatus.PENDING),
        pending_to_review=store.pending_count(profile),
        employees=employees.count() if employees is not None else 0,
        stores=len(list_stores(db)),
    )
