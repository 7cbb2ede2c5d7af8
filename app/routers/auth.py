from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import logging
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.limiter import limiter
from app.database import get_db
from app.models.user import User, UserSession
from app.services import auth as auth_service
from app.schemas.auth import LoginRequest, RefreshRequest, Token, UserProfile
from app.routers.auth_deps import get_current_profile

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def _issue_tokens(db: Session, user: User) -> dict:
    access_token = auth_service.create_access_token(data=auth_service.token_claims(user))
    refresh_token = auth_service.create_refresh_token(data={"sub": user.email})

    expires_at = datetime.now(timezone.utc) + timedelta(days=auth_service.REFRESH_TOKEN_EXPIRE_DAYS)
    db.add(UserSession(
        user_id=user.id,
        refresh_token=refresh_token,
        expires_at=expires_at.replace(tzinfo=None)
    ))
    db.commit()

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "user": UserProfile.model_validate(user),
    }


@router.post("/login", response_model=Token)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        logger.info("Failed login", extra={"email": login_data.email})
        raise AuthenticationError("Incorrect email or password")

    try:
        tokens = _issue_tokens(db, user)
    except Exception as e:
        db.rollback()
        logger.error(f"Login error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal login error. Please check server logs."
        )

    logger.info("Login", extra={"user_id": user.id, "role": user.role.value})
    return tokens


@router.post("/refresh", response_model=Token)
def refresh_token(data: RefreshRequest, db: Session = Depends(get_db)):
    payload = auth_service.decode_access_token(data.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise AuthenticationError("Invalid refresh token")

    db_session = db.query(UserSession).filter(
        UserSession.refresh_token == data.refresh_token,
        UserSession.is_revoked == False,  # noqa: E712
        UserSession.expires_at > datetime.now(timezone.utc).replace(tzinfo=None)
    ).first()

    if not db_session:
        raise AuthenticationError("Session expired or revoked")

    user = db_session.user
    if not user or not user.is_active:
        raise AuthenticationError("User inactive or not found")

    # Rotation: Revoke old, create new
    db_session.is_revoked = True
    return _issue_tokens(db, user)


@router.post("/logout")
def logout(data: RefreshRequest, db: Session = Depends(get_db)):
    db_session = db.query(UserSession).filter(UserSession.refresh_token == data.refresh_token).first()
    if db_session and not db_session.is_revoked:
        db_session.is_revoked = True
        db.commit()
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserProfile)
def get_me(profile: UserProfile = Depends(get_current_profile)):
    return profile
