from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import List, Optional
from app.models.leave_request import LeaveStatus


class LeaveRequestRecord(BaseModel):
    """A leave request as seen by the policy layer, independent of storage."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    user_name: str
    store_id: str
    store_name: str
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    created_at: datetime


class LeaveRequestCreate(BaseModel):
    # Optional so that missing fields surface as a leave validation error
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None


class LeaveRequestResponse(LeaveRequestRecord):
    period_label: str


class LeaveActionResult(BaseModel):
    success: bool = True
    changed: bool
    leave_status: Optional[LeaveStatus] = None


class CalendarDay(BaseModel):
    day: date
    in_month: bool
    requests: List[LeaveRequestResponse]


class CalendarMonth(BaseModel):
    month: str
    store_id: Optional[str] = None
    days: List[CalendarDay]


class LeaveSummary(BaseModel):
    my_approved: int
    my_pending: int
    pending_to_review: int
    employees: int
    stores: int
