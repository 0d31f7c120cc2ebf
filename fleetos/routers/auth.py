# fleetos/routers/auth.py

from datetime import datetime, timedelta
from typing import Optional
import logging

from fastapi import APIRouter, Depends, status, HTTPException, Response, Request
from sqlalchemy.orm import Session
from sqlalchemy import or_

from fleetos import models, schemas, oauth2
from fleetos.database import get_db
from fleetos.config import get_settings
from fleetos.utils import unique_string
from fleetos.security import (
    hash_password,
    verify_password,
    is_password_strong_enough,
    SessionClaims,
    create_session_token,
    read_session_token
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/api/auth",
    tags=['Auth']
)

# =================================================================================
# HELPER FUNCTIONS (Internal)
# =================================================================================

def _open_session(user: models.User, db: Session) -> dict:
    """
    Stores a UserToken row and returns the signed token pointing at it.
    """
    access_key = unique_string(50)
    expires = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

    user_token = models.UserToken(
        user_id=user.id,
        access_key=access_key,
        expires_at=datetime.utcnow() + expires
    )
    db.add(user_token)
    db.commit()
    db.refresh(user_token)

    claims = SessionClaims(user_id=user.id, session_id=user_token.id, access_key=access_key)
    access_token = create_session_token(claims, settings.JWT_SECRET, settings.JWT_ALGORITHM, expires)

    return {
        "access_token": access_token,
        "expires_in": int(expires.total_seconds()),
        "user_id": user.id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "role": user.role,
    }


def _close_session(token: str, db: Session) -> bool:
    claims = read_session_token(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    if not claims:
        return False

    deleted = db.query(models.UserToken).filter(
        models.UserToken.id == claims.session_id,
        models.UserToken.access_key == claims.access_key
    ).delete(synchronize_session=False)
    db.commit()
    return bool(deleted)

# =================================================================================
# AUTH ENDPOINTS
# =================================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.UserOut)
def register_user(
    user_data: schemas.RegisterUserRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account.
    Forces the 'user' role; elevated roles are granted by an admin.
    """
    existing = db.query(models.User).filter(
        or_(models.User.username == user_data.username, models.User.email == user_data.email)
    ).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username or email already in use.")

    if not is_password_strong_enough(user_data.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please provide a strong password.")

    new_user = models.User(
        username=user_data.username,
        email=user_data.email,
        name=user_data.name,
        password=hash_password(user_data.password),
        role=models.UserRole.USER,
        is_active=True
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"Registered user {new_user.username} (ID: {new_user.id})")
    return new_user


@router.post("/login", status_code=status.HTTP_200_OK, response_model=schemas.LoginResponse)
def login(
    credentials: schemas.LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Authenticate and open a session. The token is returned in the body and
    set as an http-only cookie.
    """
    user = db.query(models.User).filter(models.User.username == credentials.username).first()

    if not user or not verify_password(credentials.password, user.password):
        logger.warning(f"Failed login for '{credentials.username}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password.")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated. Contact support.")

    session = _open_session(user, db)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session["access_token"],
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.SESSION_EXPIRE_MINUTES * 60
    )
    logger.info(f"User {user.username} logged in")
    return session


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(oauth2.oauth2_scheme),
    db: Session = Depends(get_db)
):
    auth_token = oauth2.extract_token(request, token)
    if auth_token:
        _close_session(auth_token, db)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully."}


@router.get("/me", response_model=schemas.UserOut)
def read_me(current_user: models.User = Depends(oauth2.get_current_user)):
    return current_user
