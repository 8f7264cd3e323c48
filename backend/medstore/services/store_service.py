"""Store CRUD and the parent-deletion guard."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from medstore.core.exceptions import BusinessError
from medstore.models.billing import Billing
from medstore.models.medicine import Medicine
from medstore.models.store import Store
from medstore.models.user import User

logger = logging.getLogger(__name__)


def clean_store_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise BusinessError.bad_request("Store name is required")
    return name


def get_store(db: Session, store_id: int) -> Store:
    store = db.query(Store).filter(Store.id == store_id).first()
    if not store:
        raise BusinessError.not_found("Store")
    return store


def list_stores(db: Session, store_id: Optional[int] = None) -> List[Store]:
    """All stores, or only ``store_id`` when given."""
    q = db.query(Store)
    if store_id is not None:
        q = q.filter(Store.id == store_id)
    return q.order_by(Store.name).all()


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    q = db.query(Store).filter(Store.name == name)
    if exclude_id is not None:
        q = q.filter(Store.id != exclude_id)
    if q.first():
        raise BusinessError.bad_request("Store name already exists")


def _commit_name(db: Session, store: Store) -> Store:
    # Unique index catches a concurrent insert of the same name
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BusinessError.bad_request("Store name already exists")
    db.refresh(store)
    return store


def create_store(db: Session, name: str) -> Store:
    name = clean_store_name(name)
    _ensure_unique_name(db, name)
    store = Store(name=name)
    db.add(store)
    store = _commit_name(db, store)
    logger.info(f"Created store {store.id} ({store.name})")
    return store


def update_store(db: Session, store: Store, name: str) -> Store:
    name = clean_store_name(name)
    _ensure_unique_name(db, name, exclude_id=store.id)
    store.name = name
    return _commit_name(db, store)


def delete_store(db: Session, store: Store) -> None:
    """Delete a store that nothing references any more."""
    if db.query(Medicine.id).filter(Medicine.store_id == store.id).first():
        raise BusinessError.bad_request(
            "Cannot delete store with existing medicines. Please delete medicines first."
        )
    if db.query(Billing.id).filter(Billing.store_id == store.id).first():
        raise BusinessError.bad_request(
            "Cannot delete store with existing prescriptions. Please delete prescriptions first."
        )
    if db.query(User.id).filter(User.store_id == store.id).first():
        raise BusinessError.bad_request(
            "Cannot delete store with assigned users. Please reassign or delete users first."
        )
    store_id = store.id
    db.delete(store)
    db.commit()
    logger.info(f"Deleted store {store_id}")
