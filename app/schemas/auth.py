from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from app.models.user import UserRole
from app.schemas.store import StoreOut


class UserProfile(BaseModel):
    """Identity handed to the leave policy and persisted by client sessions."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: EmailStr
    role: UserRole
    store_id: Optional[str] = None
    store: Optional[StoreOut] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: Optional[UserProfile] = None


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
