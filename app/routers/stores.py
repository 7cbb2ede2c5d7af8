from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.store import StoreOut
from app.services.store_directory import list_stores

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("", response_model=List[StoreOut])
def get_stores(db: Session = Depends(get_db)):
    return list_stores(db)
