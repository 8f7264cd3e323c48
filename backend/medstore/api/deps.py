"""FastAPI dependencies: DB session, current user from the bearer token, admin gate."""
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from medstore.core.exceptions import BusinessError
from medstore.core.permissions import ensure_admin
from medstore.core.security import decode_access_token
from medstore.db.session import SessionLocal
from medstore.models.user import User

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> int:
    """Extract the user id from the Authorization: Bearer token."""
    if not credentials:
        raise BusinessError.unauthorized("No token provided")

    sub = decode_access_token(credentials.credentials)
    if not sub:
        raise BusinessError.unauthorized("Invalid token", reason="invalid or expired token")

    try:
        return int(sub)
    except ValueError:
        raise BusinessError.unauthorized("Invalid token", reason=f"non-numeric subject {sub!r}")


def get_current_user(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> User:
    """Load current user from DB so role and store changes apply immediately."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise BusinessError.unauthorized("Invalid token", reason=f"user {user_id} no longer exists")
    return user


def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    ensure_admin(current_user, "write", "admin_route")
    return current_user
