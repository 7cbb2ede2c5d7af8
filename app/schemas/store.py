from pydantic import BaseModel, ConfigDict
from typing import Optional


class StoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    location: Optional[str] = None
