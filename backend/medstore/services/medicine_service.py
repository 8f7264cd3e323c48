"""Medicine CRUD, stock updates and the per-billing stock decrement."""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from medstore.core.exceptions import BusinessError
from medstore.models.billing import Billing
from medstore.models.medicine import Medicine
from medstore.schemas.medicine import MedicineCreate, MedicineUpdate
from medstore.services import store_service

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise BusinessError.bad_request(f"{label} is required")
    return value


def _validate_stock(stock: int) -> None:
    if stock < 0:
        raise BusinessError.bad_request("Stock must be a non-negative number")


def _validate_expiry(expiry_date: date) -> None:
    if expiry_date < date.today():
        raise BusinessError.bad_request("Expiry date cannot be in the past")


def get_medicine(db: Session, medicine_id: int) -> Medicine:
    medicine = (
        db.query(Medicine)
        .options(joinedload(Medicine.store))
        .filter(Medicine.id == medicine_id)
        .first()
    )
    if not medicine:
        raise BusinessError.not_found("Medicine")
    return medicine


def list_medicines(db: Session, store_id: Optional[int] = None) -> List[Medicine]:
    q = db.query(Medicine).options(joinedload(Medicine.store))
    if store_id is not None:
        q = q.filter(Medicine.store_id == store_id)
    return q.order_by(Medicine.name, Medicine.id).all()


def list_store_medicines(db: Session, store_id: int) -> List[Medicine]:
    """Medicines of one store; 404 when the store does not exist."""
    store_service.get_store(db, store_id)
    return list_medicines(db, store_id=store_id)


def create_medicine(db: Session, data: MedicineCreate) -> Medicine:
    name = _require_text(data.name, "Medicine name")
    batch_number = _require_text(data.batch_number, "Batch number")
    _validate_stock(data.stock)
    store_service.get_store(db, data.store_id)
    _validate_expiry(data.expiry_date)

    medicine = Medicine(
        name=name,
        store_id=data.store_id,
        expiry_date=data.expiry_date,
        stock=data.stock,
        batch_number=batch_number,
    )
    db.add(medicine)
    db.commit()
    logger.info(f"Created medicine {medicine.id} ({name}) in store {data.store_id}")
    return get_medicine(db, medicine.id)


def update_medicine(db: Session, medicine: Medicine, updates: MedicineUpdate) -> Medicine:
    """Apply the supplied fields. Validation runs before anything changes."""
    if updates.stock is not None:
        _validate_stock(updates.stock)
    if updates.store_id is not None and updates.store_id != medicine.store_id:
        store_service.get_store(db, updates.store_id)
        # Billings must keep pointing at the medicine's own store
        if db.query(Billing.id).filter(Billing.medicine_id == medicine.id).first():
            raise BusinessError.bad_request(
                "Cannot move medicine with existing prescriptions to another store"
            )
    if updates.expiry_date is not None:
        _validate_expiry(updates.expiry_date)

    if updates.name is not None:
        medicine.name = _require_text(updates.name, "Medicine name")
    if updates.batch_number is not None:
        medicine.batch_number = _require_text(updates.batch_number, "Batch number")
    if updates.store_id is not None:
        medicine.store_id = updates.store_id
    if updates.expiry_date is not None:
        medicine.expiry_date = updates.expiry_date
    if updates.stock is not None:
        medicine.stock = updates.stock

    db.commit()
    return get_medicine(db, medicine.id)


def set_stock(db: Session, medicine: Medicine, stock: int) -> Medicine:
    if stock < 0:
        raise BusinessError.bad_request("Valid stock number is required")
    medicine.stock = stock
    db.commit()
    return get_medicine(db, medicine.id)


def take_one_unit(db: Session, medicine_id: int) -> bool:
    """
    Decrement stock by one unless it is already zero.

    Runs as a single conditional UPDATE so concurrent billings cannot push
    stock below zero. Does not commit; the caller owns the transaction.
    """
    taken = (
        db.query(Medicine)
        .filter(Medicine.id == medicine_id, Medicine.stock > 0)
        .update({Medicine.stock: Medicine.stock - 1}, synchronize_session=False)
    )
    return taken == 1


def delete_medicine(db: Session, medicine: Medicine) -> None:
    if db.query(Billing.id).filter(Billing.medicine_id == medicine.id).first():
        raise BusinessError.bad_request(
            "Cannot delete medicine with existing prescriptions. Please delete prescriptions first."
        )
    medicine_id = medicine.id
    db.delete(medicine)
    db.commit()
    logger.info(f"Deleted medicine {medicine_id}")
