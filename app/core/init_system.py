import logging
from app.core.config import settings
from app.database import SessionLocal
from app.models.leave_request import LeaveRequest
from app.models.store import Store
from app.models.user import User
from app.services import auth as auth_service
from app.services.demo_data import DEFAULT_STORES, DEMO_USERS, generate_mock_leave_requests

logger = logging.getLogger(__name__)


def seed_demo_data(db) -> bool:
    """
    Populate stores, demo users and mock leave requests into empty tables.
    Returns True when anything was written.
    """
    seeded = False

    if db.query(Store).count() == 0:
        for store in DEFAULT_STORES:
            db.add(Store(**store.model_dump()))
        seeded = True

    if db.query(User).count() == 0:
        hashed_pwd = auth_service.get_password_hash(settings.demo_password)
        for user_id, name, email, role, store_id in DEMO_USERS:
            db.add(User(
                id=user_id,
                name=name,
                email=email,
                role=role,
                store_id=store_id,
                hashed_password=hashed_pwd,
                is_active=True
            ))
        seeded = True

    if db.query(LeaveRequest).count() == 0:
        # Oldest first so the highest sequence is the newest insertion
        for record in reversed(generate_mock_leave_requests()):
            row = LeaveRequest(**record.model_dump())
            row.status = record.status.value
            db.add(row)
        seeded = True

    db.commit()
    return seeded


def init_system_data():
    """
    Checks if the system needs initialization and seeds demo data when enabled.
    """
    if not settings.seed_demo_data:
        logger.info("Demo data seeding disabled.")
        return

    db = SessionLocal()
    try:
        if seed_demo_data(db):
            logger.info("System bootstrapped with demo data (demo password from DEMO_PASSWORD).")
        else:
            logger.info("System initialization check: data already present.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()
