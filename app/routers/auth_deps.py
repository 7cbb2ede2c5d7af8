"""
Authentication and role dependencies for FastAPI endpoints.
"""
import logging
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Callable, List
from app.core.exceptions import AccessDeniedError, AuthenticationError
from app.database import get_db
from app.models.user import User, UserRole
from app.repositories.leave_repository import SqlLeaveRepository
from app.schemas.auth import TokenData, UserProfile
from app.services import auth as auth_service
from app.services.leave_store import LeaveRequestStore, log_leave_event

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """
    Extracts and validates the current user from the JWT token.
    """
    payload = auth_service.decode_access_token(token)

    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise AuthenticationError("Could not validate credentials")

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise AuthenticationError("TOKEN_EXPIRED")

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise AuthenticationError("Invalid token type")

    email = payload.get("sub")
    if email is None:
        logger.warning("Authentication failed: Missing subject (email) in token")
        raise AuthenticationError("Missing subject in token")

    token_data = TokenData(email=email, role=payload.get("role"))
    user = db.query(User).filter(User.email == token_data.email).first()

    if user is None:
        logger.warning(f"Authentication failed: User {email} not found in database")
        raise AuthenticationError("User not found")
    if not user.is_active:
        logger.warning(f"Authentication failed: User {email} is inactive")
        raise AccessDeniedError("User is inactive")
    return user


def get_current_profile(current_user: User = Depends(get_current_user)) -> UserProfile:
    return UserProfile.model_validate(current_user)


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.get("/admin-only")
        def admin_endpoint(user: UserProfile = Depends(require_role([UserRole.ADMIN]))):
            ...
    """
    def role_checker(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
        if profile.role not in allowed_roles:
            raise AccessDeniedError(f"Access denied. Required roles: {[r.value for r in allowed_roles]}")
        return profile
    return role_checker


def require_approver():
    """Shorthand for the roles allowed to resolve leave requests."""
    return require_role([UserRole.ADMIN, UserRole.MANAGER])


def get_leave_store(db: Session = Depends(get_db)) -> LeaveRequestStore:
    store = LeaveRequestStore(SqlLeaveRepository(db))
    store.subscribe(log_leave_event)
    return store
