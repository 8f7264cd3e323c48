"""Billings (prescriptions).

Any signed-in user may manage billings, store users only within their own
store. Reads outside the caller's store answer 404, writes answer 403.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from medstore.api.deps import get_db, get_current_user
from medstore.core.audit import AuditLog
from medstore.core.permissions import ensure_store_readable, ensure_store_writable, visible_store_id
from medstore.models.user import User
from medstore.schemas.billing import BillingCreate, BillingUpdate, BillingResponse
from medstore.services import billing_service, medicine_service, store_service

router = APIRouter()


def _responses(billings) -> List[BillingResponse]:
    return [BillingResponse.model_validate(b) for b in billings]


@router.get("", response_model=List[BillingResponse])
def list_billings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not current_user.is_admin and current_user.store_id is None:
        return []
    return _responses(billing_service.list_billings(db, store_id=visible_store_id(current_user)))


@router.get("/store/{store_id}", response_model=List[BillingResponse])
def list_billings_by_store(
    store_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_store_readable(current_user, store_id, "Store", store_id)
    store_service.get_store(db, store_id)
    return _responses(billing_service.list_billings(db, store_id=store_id))


@router.get("/medicine/{medicine_id}", response_model=List[BillingResponse])
def list_billings_by_medicine(
    medicine_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    medicine = medicine_service.get_medicine(db, medicine_id)
    ensure_store_readable(current_user, medicine.store_id, "Medicine", medicine_id)
    return _responses(billing_service.list_billings(db, medicine_id=medicine_id))


@router.get("/patient/{name}", response_model=List[BillingResponse])
def list_billings_by_patient(
    name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Case-insensitive patient name search within the caller's visible stores."""
    if not current_user.is_admin and current_user.store_id is None:
        return []
    billings = billing_service.list_billings(
        db, store_id=visible_store_id(current_user), patient=name.strip()
    )
    return _responses(billings)


@router.get("/{billing_id}", response_model=BillingResponse)
def get_billing(billing_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    billing = billing_service.get_billing(db, billing_id)
    ensure_store_readable(current_user, billing.store_id, "Prescription", billing_id)
    return BillingResponse.model_validate(billing)


@router.post("", response_model=BillingResponse, status_code=status.HTTP_201_CREATED)
def create_billing(data: BillingCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_store_writable(current_user, data.store_id, "billing")
    billing = billing_service.create_billing(db, data)
    AuditLog.log_action("create", "billing", billing.id, current_user, changes={
        "medicine_id": billing.medicine_id,
        "store_id": billing.store_id,
        "frequency": billing.frequency,
    })
    return BillingResponse.model_validate(billing)


@router.put("/{billing_id}", response_model=BillingResponse)
def update_billing(
    billing_id: int,
    updates: BillingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    billing = billing_service.get_billing(db, billing_id)
    ensure_store_readable(current_user, billing.store_id, "Prescription", billing_id)
    if updates.store_id is not None:
        ensure_store_writable(current_user, updates.store_id, "billing", billing_id)
    billing = billing_service.update_billing(db, billing, updates)
    AuditLog.log_action(
        "update", "billing", billing_id, current_user,
        changes=updates.model_dump(mode="json", exclude_none=True, exclude={"name", "number", "description"}),
    )
    return BillingResponse.model_validate(billing)


@router.delete("/{billing_id}", response_model=dict)
def delete_billing(billing_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    billing = billing_service.get_billing(db, billing_id)
    ensure_store_readable(current_user, billing.store_id, "Prescription", billing_id)
    snapshot = BillingResponse.model_validate(billing).model_dump(mode="json")
    billing_service.delete_billing(db, billing)
    AuditLog.log_action("delete", "billing", billing_id, current_user)
    return {"message": "Prescription deleted successfully", "prescription": snapshot}
