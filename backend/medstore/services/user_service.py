"""User accounts: admin-managed CRUD, login lookup and the bootstrap admin."""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from medstore.core.exceptions import BusinessError
from medstore.core.security import verify_password
from medstore.models.user import User, ROLE_ADMIN, ROLE_USER
from medstore.schemas.user import UserCreate, UserUpdate
from medstore.services import store_service

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).options(joinedload(User.store)).filter(User.id == user_id).first()
    if not user:
        raise BusinessError.not_found("User")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).options(joinedload(User.store)).order_by(User.email).all()


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when email and password match, else None."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        return None
    return user


def _validate_store_assignment(db: Session, role: str, store_id: Optional[int]) -> None:
    if role == ROLE_USER and store_id is None:
        raise BusinessError.bad_request("Store is required for store users")
    if store_id is not None:
        store_service.get_store(db, store_id)


def create_user(db: Session, data: UserCreate) -> User:
    email = normalize_email(data.email)
    if get_user_by_email(db, email):
        raise BusinessError.bad_request("User already exists")
    _validate_store_assignment(db, data.role, data.store_id)

    user = User(email=email, password=data.password, role=data.role, store_id=data.store_id)
    db.add(user)
    db.commit()
    logger.info(f"Created user {user.id} ({email}, role={data.role})")
    return get_user(db, user.id)


def update_user(db: Session, user: User, updates: UserUpdate, acting_user: User) -> User:
    """
    Apply the supplied fields; omitted fields keep their value.

    An explicit null store_id clears the assignment. Admins cannot change
    their own role.
    """
    email = normalize_email(updates.email) if updates.email is not None else user.email
    if email != user.email:
        existing = get_user_by_email(db, email)
        if existing and existing.id != user.id:
            raise BusinessError.bad_request("User already exists")
    if updates.password is not None and not updates.password.strip():
        raise BusinessError.bad_request("Password cannot be empty")

    role = updates.role if updates.role is not None else user.role
    if user.id == acting_user.id and role != user.role:
        raise BusinessError.bad_request("You cannot change your own role")
    store_id = updates.store_id if "store_id" in updates.model_fields_set else user.store_id
    _validate_store_assignment(db, role, store_id)

    user.email = email
    if updates.password is not None:
        user.password = updates.password
    user.role = role
    user.store_id = store_id

    db.commit()
    return get_user(db, user.id)


def delete_user(db: Session, user: User, acting_user: User) -> None:
    if user.id == acting_user.id:
        raise BusinessError.bad_request("You cannot delete your own account")
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")


def ensure_admin_account(db: Session, email: str, password: str) -> Tuple[Optional[User], bool]:
    """
    Make sure at least one admin exists.

    Returns (admin, created). admin is None when an admin already existed;
    created is False when an existing account was promoted instead.
    """
    if db.query(User).filter(User.role == ROLE_ADMIN).first():
        return None, False
    email = normalize_email(email)
    user = get_user_by_email(db, email)
    created = user is None
    if created:
        user = User(email=email, password=password, role=ROLE_ADMIN)
        db.add(user)
    else:
        user.role = ROLE_ADMIN
    db.commit()
    db.refresh(user)
    return user, created
