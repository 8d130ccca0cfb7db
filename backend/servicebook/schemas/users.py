# backend/servicebook/schemas/users.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..enums import Role


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8)
    role: Role
    company_id: Optional[int] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email")
        return v


class UserUpdate(BaseModel):
    is_active: Optional[bool] = None
    role: Optional[Role] = None
    company_id: Optional[int] = None

    model_config = {"from_attributes": True}


class UserRead(BaseModel):
    id: int
    email: str
    role: Role
    company_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
