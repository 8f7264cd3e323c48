"""Medicines: store-scoped reads, admin-only writes."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from medstore.api.deps import get_db, get_current_user, get_admin_user
from medstore.core.audit import AuditLog
from medstore.core.permissions import ensure_store_readable, visible_store_id
from medstore.models.user import User
from medstore.schemas.medicine import MedicineCreate, MedicineUpdate, MedicineResponse, StockUpdate
from medstore.services import medicine_service

router = APIRouter()


@router.get("", response_model=List[MedicineResponse])
def list_medicines(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Admins get every medicine, store users only their store's."""
    if not current_user.is_admin and current_user.store_id is None:
        return []
    medicines = medicine_service.list_medicines(db, store_id=visible_store_id(current_user))
    return [MedicineResponse.model_validate(m) for m in medicines]


@router.get("/store/{store_id}", response_model=List[MedicineResponse])
def list_medicines_by_store(
    store_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_store_readable(current_user, store_id, "Store", store_id)
    medicines = medicine_service.list_store_medicines(db, store_id)
    return [MedicineResponse.model_validate(m) for m in medicines]


@router.get("/{medicine_id}", response_model=MedicineResponse)
def get_medicine(medicine_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    medicine = medicine_service.get_medicine(db, medicine_id)
    ensure_store_readable(current_user, medicine.store_id, "Medicine", medicine_id)
    return MedicineResponse.model_validate(medicine)


@router.post("", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
def create_medicine(data: MedicineCreate, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    medicine = medicine_service.create_medicine(db, data)
    AuditLog.log_action("create", "medicine", medicine.id, admin, changes=data.model_dump(mode="json"))
    return MedicineResponse.model_validate(medicine)


@router.put("/{medicine_id}", response_model=MedicineResponse)
def update_medicine(
    medicine_id: int,
    updates: MedicineUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    medicine = medicine_service.get_medicine(db, medicine_id)
    medicine = medicine_service.update_medicine(db, medicine, updates)
    AuditLog.log_action(
        "update", "medicine", medicine_id, admin,
        changes=updates.model_dump(mode="json", exclude_none=True),
    )
    return MedicineResponse.model_validate(medicine)


@router.patch("/{medicine_id}/stock", response_model=MedicineResponse)
def update_stock(
    medicine_id: int,
    data: StockUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    medicine = medicine_service.get_medicine(db, medicine_id)
    medicine = medicine_service.set_stock(db, medicine, data.stock)
    AuditLog.log_action("update", "medicine", medicine_id, admin, changes={"stock": data.stock})
    return MedicineResponse.model_validate(medicine)


@router.delete("/{medicine_id}", response_model=dict)
def delete_medicine(medicine_id: int, db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    medicine = medicine_service.get_medicine(db, medicine_id)
    snapshot = MedicineResponse.model_validate(medicine).model_dump(mode="json")
    medicine_service.delete_medicine(db, medicine)
    AuditLog.log_action("delete", "medicine", medicine_id, admin, changes={"name": snapshot["name"]})
    return {"message": "Medicine deleted successfully", "medicine": snapshot}
