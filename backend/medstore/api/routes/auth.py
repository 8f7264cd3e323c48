"""Auth: login with email and password, and the current-user lookup.

The token is returned in the response body and sent back by the front end as
Authorization: Bearer <token>.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from medstore.api.deps import get_db, get_current_user
from medstore.core.audit import AuditLog
from medstore.core.exceptions import BusinessError
from medstore.core.security import create_access_token
from medstore.models.user import User
from medstore.schemas.user import UserLogin, UserResponse, Token
from medstore.services import user_service

router = APIRouter()


@router.post("/login", response_model=Token)
def login(data: UserLogin, request: Request, db: Session = Depends(get_db)):
    """
    Exchange credentials for a bearer token.

    Same error for unknown email and wrong password.
    """
    ip_address = request.client.host if request.client else "unknown"
    user = user_service.authenticate(db, data.email, data.password)
    if not user:
        AuditLog.log_authentication("failed_login", data.email, ip_address, False, reason="Invalid credentials")
        raise BusinessError.unauthorized("Invalid email or password", reason=f"failed login for {data.email}")

    token = create_access_token(
        subject=str(user.id),
        claims={"email": user.email, "role": user.role, "store_id": user.store_id},
    )
    AuditLog.log_authentication("login", user.email, ip_address, True)
    return Token(access_token=token, user=UserResponse.model_validate(user_service.get_user(db, user.id)))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get current authenticated user."""
    return UserResponse.model_validate(user_service.get_user(db, current_user.id))
