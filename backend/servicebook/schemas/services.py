# backend/servicebook/schemas/services.py

from typing import Optional
from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    duration: int = Field(ge=1, description="Minutes")
    price: float = Field(ge=0)
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    duration: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    duration: int
    price: float
    is_active: bool
    notes: Optional[str] = None

    model_config = {"from_attributes": True}
