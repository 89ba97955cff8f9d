"""Identity provider: bcrypt password hashes and signed bearer tokens carrying the user id."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from chefbook.config import settings

logger = logging.getLogger(__name__)


def hash_password(plain: str) -> str:
    """Hash a plain password for storing in DB. Bcrypt limit is 72 bytes."""
    return bcrypt.hashpw(plain.encode("utf-8")[:72], bcrypt.gensalt()).decode("ascii")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("ascii"))


def issue_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Encode a JWT whose 'sub' is the user id (as a string)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload: dict[str, Any] = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: object) -> int | None:
    """Return the user id carried by a valid token, or None if missing/invalid/expired."""
    if not token or not isinstance(token, str):
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
