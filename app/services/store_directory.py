import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.store import Store
from app.schemas.store import StoreOut
from app.services.demo_data import DEFAULT_STORES

logger = logging.getLogger(__name__)


def list_stores(db: Session) -> List[StoreOut]:
    """
    Stores ordered by id. Falls back to the built-in list when the
    directory is unavailable or empty.
    """
    try:
        rows = db.query(Store).order_by(Store.id).all()
    except SQLAlchemyError as e:
        logger.warning(f"Store directory unavailable, using built-in list: {e}")
        db.rollback()
        return list(DEFAULT_STORES)

    if not rows:
        return list(DEFAULT_STORES)
    return [StoreOut.model_validate(row) for row in rows]
