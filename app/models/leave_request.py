from sqlalchemy import Column, Integer, String, Date
from app.database import Base, UTCDateTime
import enum


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    # Surrogate key keeps insertion order; `id` is the client-assigned identifier
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)
    user_name = Column(String, nullable=False)
    store_id = Column(String, index=True, nullable=False)
    store_name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=False)
    status = Column(String, default=LeaveStatus.PENDING.value, nullable=False)  # Using String to store enum value for simplicity with SQLite
    created_at = Column(UTCDateTime, nullable=False)
