from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from medstore.schemas.medicine import MedicineRef
from medstore.schemas.store import StoreRef


class BillingCreate(BaseModel):
    medicine_id: int
    store_id: int
    frequency: str  # morning | evening, checked by billing_service
    name: str
    number: str
    description: Optional[str] = None


class BillingUpdate(BaseModel):
    medicine_id: Optional[int] = None
    store_id: Optional[int] = None
    frequency: Optional[str] = None
    name: Optional[str] = None
    number: Optional[str] = None
    description: Optional[str] = None


class BillingResponse(BaseModel):
    id: int
    medicine_id: int
    store_id: int
    medicine: Optional[MedicineRef] = None
    store: Optional[StoreRef] = None
    frequency: str
    name: str
    number: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
