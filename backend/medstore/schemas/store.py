from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class StoreCreate(BaseModel):
    name: str


class StoreUpdate(BaseModel):
    name: str


class StoreRef(BaseModel):
    """Store summary embedded in medicine, billing and user responses."""
    id: int
    name: str

    class Config:
        from_attributes = True


class StoreResponse(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
