"""
Password hashing and session token helpers.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from rider_expense.config import get_settings
from rider_expense.logging_config import get_logger

logger = get_logger(__name__)

TOKEN_ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    pbkdf2_sha256__rounds=get_settings().PASSWORD_HASH_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: int, now: Optional[datetime] = None) -> str:
    """Signed token whose only subject claim is the user id."""
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "exp": issued + timedelta(days=settings.TOKEN_TTL_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=TOKEN_ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """
    Return the user id carried by the token, or None.

    Any malformed, tampered or expired token yields None.
    """
    try:
        payload = jwt.decode(
            token,
            get_settings().JWT_SECRET,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
        return int(payload["sub"])
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        logger.debug(f"Rejected session token: {exc.__class__.__name__}")
        return None
