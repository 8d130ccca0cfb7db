# backend/servicebook/schemas/bookings.py

import re
from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from ..enums import BookingStatus, PaymentStatus

TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


# ── Requests ─────────────────────────────────────────────────────────────

class BookingServiceItem(BaseModel):
    service_id: int
    company_service_id: Optional[int] = None
    quantity: int = Field(1, ge=1)
    custom_price: Optional[float] = Field(None, ge=0)


class BookingCreate(BaseModel):
    services: list[BookingServiceItem] = Field(min_length=1)
    booking_date: date
    booking_time: str = Field(description="Time in HH:MM format")
    customer_notes: Optional[str] = Field(None, max_length=500)

    @field_validator("booking_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not TIME_RE.match(v):
            raise ValueError("booking_time must be in HH:MM format")
        hours, minutes = v.split(":")
        return f"{int(hours):02d}:{minutes}"


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    payment_status: Optional[PaymentStatus] = None
    admin_notes: Optional[str] = Field(None, max_length=1000)


class BookingAssign(BaseModel):
    company_id: Optional[int] = None
    user_id: Optional[int] = None
    admin_notes: Optional[str] = Field(None, max_length=1000)


class BookingAssignMember(BaseModel):
    user_id: int
    admin_notes: Optional[str] = Field(None, max_length=1000)


class BookingNotesUpdate(BaseModel):
    admin_notes: str = Field(max_length=1000)


class BookingListQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    customer_id: Optional[int] = None
    assigned_company_id: Optional[int] = None
    assigned_user_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None
    sort_by: Literal["created_at", "booking_date", "total_price", "status"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


# ── Responses ────────────────────────────────────────────────────────────

class BookingServiceRead(BaseModel):
    service_id: int
    company_service_id: Optional[int] = None
    quantity: int
    custom_price: Optional[float] = None
    service_name: str
    service_duration: int
    service_price: float


class BookingRead(BaseModel):
    id: int

    customer_id: int
    customer_email: str = ""
    services: list[BookingServiceRead]

    booking_date: date
    booking_time: str
    duration: int
    total_price: float

    status: BookingStatus
    payment_status: PaymentStatus

    assigned_company_id: Optional[int] = None
    assigned_company_name: str = ""
    assigned_user_id: Optional[int] = None
    assigned_user_email: str = ""
    assigned_by: Optional[int] = None
    assigned_by_email: str = ""

    customer_notes: Optional[str] = None
    admin_notes: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking) -> "BookingRead":
        lines = []
        for line in booking.services:
            service = line.service
            lines.append(BookingServiceRead(
                service_id=line.service_id,
                company_service_id=line.company_service_id,
                quantity=line.quantity,
                custom_price=line.custom_price,
                service_name=service.name if service else "Unknown Service",
                service_duration=service.duration if service else 0,
                service_price=service.price if service else 0,
            ))

        return cls(
            id=booking.id,
            customer_id=booking.customer_id,
            customer_email=booking.customer.email if booking.customer else "",
            services=lines,
            booking_date=booking.booking_date,
            booking_time=booking.booking_time,
            duration=booking.duration,
            total_price=booking.total_price,
            status=booking.status,
            payment_status=booking.payment_status,
            assigned_company_id=booking.assigned_company_id,
            assigned_company_name=booking.assigned_company.name if booking.assigned_company else "",
            assigned_user_id=booking.assigned_user_id,
            assigned_user_email=booking.assigned_user.email if booking.assigned_user else "",
            assigned_by=booking.assigned_by,
            assigned_by_email=booking.assigner.email if booking.assigner else "",
            customer_notes=booking.customer_notes,
            admin_notes=booking.admin_notes,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingPage(BaseModel):
    bookings: list[BookingRead]
    total: int
    page: int
    limit: int


class CompanyMemberRead(BaseModel):
    id: int
    email: str
    role: str
    is_active: bool
    company_id: Optional[int] = None
    company_name: str = ""
