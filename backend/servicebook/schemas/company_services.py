# backend/servicebook/schemas/company_services.py

from typing import Optional
from pydantic import BaseModel, Field

from .services import ServiceRead


class CompanyServiceCreate(BaseModel):
    service_id: int
    custom_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class CompanyServiceUpdate(BaseModel):
    custom_price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class CompanyServiceRead(BaseModel):
    id: int
    company_id: int
    service_id: int
    custom_price: Optional[float] = None
    is_active: bool
    notes: Optional[str] = None
    service: Optional[ServiceRead] = None

    model_config = {"from_attributes": True}
