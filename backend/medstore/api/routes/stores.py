"""Stores: admins manage all stores, store users see only their own."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from medstore.api.deps import get_db, get_current_user, get_admin_user
from medstore.core.audit import AuditLog
from medstore.core.permissions import ensure_store_readable, visible_store_id
from medstore.models.user import User
from medstore.schemas.medicine import MedicineResponse
from medstore.schemas.store import StoreCreate, StoreUpdate, StoreResponse
from medstore.services import medicine_service, store_service

router = APIRouter()


@router.get("", response_model=List[StoreResponse])
def list_stores(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not current_user.is_admin and current_user.store_id is None:
        return []
    stores = store_service.list_stores(db, store_id=visible_store_id(current_user))
    return [StoreResponse.model_validate(s) for s in stores]


@router.get("/{store_id}", response_model=StoreResponse)
def get_store(store_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_store_readable(current_user, store_id, "Store", store_id)
    return StoreResponse.model_validate(store_service.get_store(db, store_id))


@router.get("/{store_id}/medicines", response_model=List[MedicineResponse])
def list_store_medicines(
    store_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_store_readable(current_user, store_id, "Store", store_id)
    medicines = medicine_service.list_store_medicines(db, store_id)
    return [MedicineResponse.model_validate(m) for m in medicines]


@router.post("", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
def create_store(data: StoreCreate, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    store = store_service.create_store(db, data.name)
    AuditLog.log_action("create", "store", store.id, admin, changes={"name": store.name})
    return StoreResponse.model_validate(store)


@router.put("/{store_id}", response_model=StoreResponse)
def update_store(
    store_id: int,
    data: StoreUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    store = store_service.get_store(db, store_id)
    store = store_service.update_store(db, store, data.name)
    AuditLog.log_action("update", "store", store.id, admin, changes={"name": store.name})
    return StoreResponse.model_validate(store)


@router.delete("/{store_id}", response_model=dict)
def delete_store(store_id: int, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    store = store_service.get_store(db, store_id)
    snapshot = StoreResponse.model_validate(store).model_dump(mode="json")
    store_service.delete_store(db, store)
    AuditLog.log_action("delete", "store", store_id, admin, changes={"name": snapshot["name"]})
    return {"message": "Store deleted successfully", "store": snapshot}
