from typing import List, Optional
from datetime import datetime

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, joinedload

from fleetos.database import get_session
from fleetos.config import get_settings
from fleetos import models
from fleetos.security import read_session_token

settings = get_settings()

# Authorization: Bearer <token>; the session cookie is the fallback
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

# --- CORE USER RETRIEVAL LOGIC ---

def get_token_user(token: str, db: Session) -> Optional[models.User]:
    """
    Decodes the token and verifies it against the UserToken table.
    A session is valid only while its row exists and has not expired.
    """
    if not token:
        return None

    claims = read_session_token(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    if not claims:
        return None

    user_token = db.query(models.UserToken).options(
        joinedload(models.UserToken.user)
    ).filter(
        models.UserToken.access_key == claims.access_key,
        models.UserToken.id == claims.session_id,
        models.UserToken.user_id == claims.user_id,
        models.UserToken.expires_at > datetime.utcnow()
    ).first()

    if user_token and user_token.user:
        return user_token.user
    return None


def extract_token(request: Request, header_token: Optional[str]) -> Optional[str]:
    """Header first, then cookie."""
    if header_token:
        return header_token
    cookie_token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if cookie_token:
        return cookie_token.split(" ")[1] if cookie_token.startswith("Bearer ") else cookie_token
    return None


# --- DEPENDENCIES ---

async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_session)
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    auth_token = extract_token(request, token)
    if not auth_token:
        raise credentials_exception

    user = get_token_user(auth_token, db)
    if not user:
        credentials_exception.detail = "Invalid or expired session"
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User is inactive")

    return user


# --- ROLE CHECKERS ---

def require_role(allowed_roles: List[str]):
    """
    Factory for role-based permission checks.
    """
    async def role_checker(user: models.User = Depends(get_current_user)):
        if user.role.value not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Action requires one of the following roles: {', '.join(allowed_roles)}"
            )
        return user
    return role_checker

# --- PRE-DEFINED DEPENDENCIES ---

require_admin = require_role(["admin"])
require_manager = require_role(["admin", "workshop_manager"])
require_technician = require_role(["admin", "workshop_manager", "technician"])
