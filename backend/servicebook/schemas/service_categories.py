# backend/servicebook/schemas/service_categories.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ..enums import ServiceCategoryType

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class ServiceCategoryCreate(BaseModel):
    name: str = Field(min_length=2)
    type: ServiceCategoryType
    slug: str = Field(min_length=2, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    is_active: bool = True

    model_config = {"from_attributes": True}


class ServiceCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    type: Optional[ServiceCategoryType] = None
    slug: Optional[str] = Field(None, min_length=2, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    is_active: Optional[bool] = None

    model_config = {"from_attributes": True}


class ServiceCategoryRead(BaseModel):
    id: int
    name: str
    type: ServiceCategoryType
    slug: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
