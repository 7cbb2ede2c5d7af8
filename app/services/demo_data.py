"""
Built-in reference data and mock leave requests for demos and tests.
"""
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from app.models.leave_request import LeaveStatus
from app.models.user import UserRole
from app.schemas.leave import LeaveRequestRecord
from app.schemas.store import StoreOut

DEFAULT_STORES: List[StoreOut] = [
    StoreOut(id="1", name="Paris Store", location="Paris"),
    StoreOut(id="2", name="Lyon Store", location="Lyon"),
    StoreOut(id="3", name="Marseille Store", location="Marseille"),
    StoreOut(id="4", name="Bordeaux Store", location="Bordeaux"),
    StoreOut(id="5", name="Lille Store", location="Lille"),
    StoreOut(id="6", name="Strasbourg Store", location="Strasbourg"),
    StoreOut(id="7", name="Nice Store", location="Nice"),
]

# (id, name, email, role, store_id)
DEMO_USERS = [
    ("1", "Admin", "admin@example.com", UserRole.ADMIN, None),
    ("2", "Paris Manager", "paris@example.com", UserRole.MANAGER, "1"),
    ("3", "Lyon Manager", "lyon@example.com", UserRole.MANAGER, "2"),
    ("4", "Employee 1", "emp1@example.com", UserRole.EMPLOYEE, "1"),
    ("5", "Employee 2", "emp2@example.com", UserRole.EMPLOYEE, "1"),
    ("6", "Employee 3", "emp3@example.com", UserRole.EMPLOYEE, "2"),
]


def generate_mock_leave_requests(today: Optional[date] = None) -> List[LeaveRequestRecord]:
    """Four requests spread over the coming weeks, newest first."""
    today = today or date.today()
    created_at = datetime.now(timezone.utc)

    def record(id, user_id, user_name, store_id, store_name, start, end, reason, status):
        return LeaveRequestRecord(
            id=id,
            user_id=user_id,
            user_name=user_name,
            store_id=store_id,
            store_name=store_name,
            start_date=today + timedelta(days=start),
            end_date=today + timedelta(days=end),
            reason=reason,
            status=status,
            created_at=created_at,
        )

    return [
        record("1", "4", "Employee 1", "1", "Paris Store", 5, 9, "Summer holiday", LeaveStatus.PENDING),
        record("2", "5", "Employee 2", "1", "Paris Store", 8, 12, "Family matters", LeaveStatus.APPROVED),
        record("3", "6", "Employee 3", "2", "Lyon Store", 3, 7, "Sick leave", LeaveStatus.REJECTED),
        record("4", "4", "Employee 1", "1", "Paris Store", 20, 25, "Personal leave", LeaveStatus.PENDING),
    ]
