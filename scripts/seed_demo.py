"""
Create the schema and seed demo stores, users and leave requests.

Usage: python scripts/seed_demo.py
"""
import sys
import os
import logging

# Ensure we can import app modules
sys.path.append(os.getcwd())

from app.core.config import settings
from app.core.init_system import seed_demo_data
from app.database import SessionLocal, init_db
from app.services.demo_data import DEMO_USERS

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main():
    init_db()
    db = SessionLocal()
    try:
        if seed_demo_data(db):
            logger.info("Demo data created.")
            for _, name, email, role, _ in DEMO_USERS:
                logger.info(f"  {role.value:<8} {email} ({name})")
            logger.info(f"Password for every demo account: {settings.demo_password}")
        else:
            logger.warning("Tables already populated. Skipping.")
    except Exception as e:
        db.rollback()
        logger.error(f"Seeding failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
