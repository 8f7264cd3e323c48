from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator

from medstore.schemas.store import StoreRef


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    role: Literal["admin", "user"] = "user"
    store_id: Optional[int] = None

    @field_validator('password')
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Password is required')
        return v


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[Literal["admin", "user"]] = None
    store_id: Optional[int] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    role: str
    store_id: Optional[int] = None
    store: Optional[StoreRef] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
