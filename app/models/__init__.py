# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import store, user, leave_request

# Explicit class exports for cleaner imports
from .store import Store
from .user import User, UserRole, UserSession
from .leave_request import LeaveRequest, LeaveStatus

__all__ = [
    "Store",
    "User",
    "UserRole",
    "UserSession",
    "LeaveRequest",
    "LeaveStatus",
]
