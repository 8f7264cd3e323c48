"""Bearer token issuing and verification (HS256 JWT)."""
from datetime import datetime, timedelta, timezone
import logging
import secrets
from typing import Any, Dict, Optional

import jwt

from medstore.core.config import settings

logger = logging.getLogger(__name__)


def create_access_token(subject: str, claims: Optional[Dict[str, Any]] = None,
                        expires_minutes: Optional[int] = None) -> str:
    """Sign a token for ``subject`` (the user id) with optional extra claims."""
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = dict(claims or {})
    payload.update({
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    })
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the token subject, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid access token: {type(e).__name__}")
        return None
    return payload.get("sub")


def verify_password(plain_password: str, stored_password: str) -> bool:
    # Passwords are stored as given; compare in constant time.
    return secrets.compare_digest(plain_password.encode("utf-8"), stored_password.encode("utf-8"))
