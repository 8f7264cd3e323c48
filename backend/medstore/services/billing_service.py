"""Billing (prescription) CRUD with cross-entity validation.

A billing must reference an existing medicine and store, and the store must be
the medicine's store. Creating a billing takes one unit of the medicine's
stock in the same transaction as the insert.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from medstore.core.exceptions import BusinessError
from medstore.models.billing import Billing
from medstore.schemas.billing import BillingCreate, BillingUpdate
from medstore.services import medicine_service, store_service

logger = logging.getLogger(__name__)

FREQUENCIES = ("morning", "evening")


def _validate_frequency(frequency: str) -> str:
    if frequency not in FREQUENCIES:
        raise BusinessError.bad_request('Frequency must be either "morning" or "evening"')
    return frequency


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    return description.strip() or None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _query(db: Session):
    return db.query(Billing).options(joinedload(Billing.medicine), joinedload(Billing.store))


def get_billing(db: Session, billing_id: int) -> Billing:
    billing = _query(db).filter(Billing.id == billing_id).first()
    if not billing:
        raise BusinessError.not_found("Prescription")
    return billing


def list_billings(
    db: Session,
    store_id: Optional[int] = None,
    medicine_id: Optional[int] = None,
    patient: Optional[str] = None,
) -> List[Billing]:
    """Billings newest first, optionally filtered by store, medicine or patient name."""
    q = _query(db)
    if store_id is not None:
        q = q.filter(Billing.store_id == store_id)
    if medicine_id is not None:
        q = q.filter(Billing.medicine_id == medicine_id)
    if patient is not None:
        patient = patient.strip()
        if not patient:
            return []
        q = q.filter(Billing.name.ilike(f"%{_escape_like(patient)}%", escape="\\"))
    return q.order_by(Billing.created_at.desc(), Billing.id.desc()).all()


def create_billing(db: Session, data: BillingCreate) -> Billing:
    name = (data.name or "").strip()
    number = (data.number or "").strip()
    if not name or not number or not data.frequency:
        raise BusinessError.bad_request(
            "All fields (medicine_id, store_id, frequency, name, number) are required"
        )
    frequency = _validate_frequency(data.frequency)

    medicine = medicine_service.get_medicine(db, data.medicine_id)
    store = store_service.get_store(db, data.store_id)
    if medicine.store_id != store.id:
        raise BusinessError.bad_request("Medicine does not belong to the specified store")
    if medicine.stock <= 0:
        raise BusinessError.bad_request("Medicine is out of stock")

    billing = Billing(
        medicine_id=medicine.id,
        store_id=store.id,
        frequency=frequency,
        name=name,
        number=number,
        description=_clean_description(data.description),
    )
    db.add(billing)
    db.flush()

    # Stock may have run out since the check above
    if not medicine_service.take_one_unit(db, medicine.id):
        db.rollback()
        raise BusinessError.bad_request("Medicine is out of stock")

    db.commit()
    logger.info(f"Created prescription {billing.id} for medicine {medicine.id} in store {store.id}")
    return get_billing(db, billing.id)


def update_billing(db: Session, billing: Billing, updates: BillingUpdate) -> Billing:
    """
    Apply the supplied fields.

    The resulting medicine/store pair is re-checked even when only one side
    changes. Stock is not touched.
    """
    if updates.frequency is not None:
        _validate_frequency(updates.frequency)

    medicine_id = updates.medicine_id if updates.medicine_id is not None else billing.medicine_id
    store_id = updates.store_id if updates.store_id is not None else billing.store_id
    medicine = medicine_service.get_medicine(db, medicine_id)
    store_service.get_store(db, store_id)
    if medicine.store_id != store_id:
        raise BusinessError.bad_request("Medicine does not belong to the specified store")

    name = updates.name.strip() if updates.name is not None else billing.name
    number = updates.number.strip() if updates.number is not None else billing.number
    if not name:
        raise BusinessError.bad_request("Patient name cannot be empty")
    if not number:
        raise BusinessError.bad_request("Number cannot be empty")

    billing.name = name
    billing.number = number
    if updates.description is not None:
        billing.description = _clean_description(updates.description)
    if updates.frequency is not None:
        billing.frequency = updates.frequency
    billing.medicine_id = medicine_id
    billing.store_id = store_id

    db.commit()
    return get_billing(db, billing.id)


def delete_billing(db: Session, billing: Billing) -> None:
    """Delete a prescription. The unit it took from stock is not returned."""
    billing_id = billing.id
    db.delete(billing)
    db.commit()
    logger.info(f"Deleted prescription {billing_id}")
