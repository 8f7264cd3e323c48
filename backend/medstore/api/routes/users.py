"""User administration. Admin only; passwords are never returned."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from medstore.api.deps import get_db, get_admin_user
from medstore.core.audit import AuditLog
from medstore.models.user import User
from medstore.schemas.user import UserCreate, UserUpdate, UserResponse
from medstore.services import user_service

router = APIRouter()


@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    return [UserResponse.model_validate(u) for u in user_service.list_users(db)]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    return UserResponse.model_validate(user_service.get_user(db, user_id))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    user = user_service.create_user(db, data)
    AuditLog.log_action("create", "user", user.id, admin, changes={
        "email": user.email, "role": user.role, "store_id": user.store_id,
    })
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    updates: UserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    user = user_service.get_user(db, user_id)
    user = user_service.update_user(db, user, updates, admin)
    changes = updates.model_dump(mode="json", exclude_unset=True, exclude={"password"})
    if updates.password is not None:
        changes["password"] = "changed"
    AuditLog.log_action("update", "user", user_id, admin, changes=changes)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=dict)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    user = user_service.get_user(db, user_id)
    email = user.email
    user_service.delete_user(db, user, admin)
    AuditLog.log_action("delete", "user", user_id, admin, changes={"email": email})
    return {"message": "User deleted successfully"}
