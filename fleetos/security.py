import logging
import base64
import jwt
from datetime import datetime, timedelta
from typing import NamedTuple, Optional
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SPECIAL_CHARACTERS = set('@#$%=:?./|~>!*-_')


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def is_password_strong_enough(password: str) -> bool:
    """8+ chars with upper, lower, digit and one of SPECIAL_CHARACTERS."""
    return (
        len(password) >= 8
        and any(char.isupper() for char in password)
        and any(char.islower() for char in password)
        and any(char.isdigit() for char in password)
        and any(char in SPECIAL_CHARACTERS for char in password)
    )

# --- Claim encoding ---

def str_encode(string: str) -> str:
    return base64.b85encode(string.encode('ascii')).decode('ascii')

def str_decode(string: str) -> str:
    return base64.b85decode(string.encode('ascii')).decode('ascii')


class SessionClaims(NamedTuple):
    user_id: int
    session_id: int
    access_key: str


def create_session_token(claims: SessionClaims, secret: str, algo: str, expiry: timedelta) -> str:
    """
    Sign a token naming a UserToken row. The row is the session; the token
    only points at it, so deleting the row revokes the token.
    """
    payload = {
        "sub": str_encode(str(claims.user_id)),
        "r": str_encode(str(claims.session_id)),
        "a": claims.access_key,
        "exp": datetime.utcnow() + expiry,
    }
    return jwt.encode(payload, secret, algorithm=algo)


def read_session_token(token: str, secret: str, algo: str) -> Optional[SessionClaims]:
    """Claims of a valid token, None when it is expired, tampered with or malformed."""
    try:
        payload = jwt.decode(token, secret, algorithms=[algo])
    except jwt.ExpiredSignatureError:
        logger.warning("Session token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {e}")
        return None

    try:
        return SessionClaims(
            user_id=int(str_decode(payload["sub"])),
            session_id=int(str_decode(payload["r"])),
            access_key=payload["a"],
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Malformed session claims: {e}")
        return None
