from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime

from medstore.schemas.store import StoreRef


class MedicineCreate(BaseModel):
    name: str
    store_id: int
    expiry_date: date
    stock: int
    batch_number: str


class MedicineUpdate(BaseModel):
    name: Optional[str] = None
    store_id: Optional[int] = None
    expiry_date: Optional[date] = None
    stock: Optional[int] = None
    batch_number: Optional[str] = None


class StockUpdate(BaseModel):
    stock: int


class MedicineRef(BaseModel):
    """Medicine summary embedded in billing responses."""
    id: int
    name: str
    expiry_date: date
    stock: int
    batch_number: str

    class Config:
        from_attributes = True


class MedicineResponse(BaseModel):
    id: int
    name: str
    store_id: int
    store: Optional[StoreRef] = None
    expiry_date: date
    stock: int
    batch_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
