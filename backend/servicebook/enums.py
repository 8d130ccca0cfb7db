# backend/servicebook/enums.py

from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    COMPANY_ADMIN = "company_admin"
    MEMBER = "member"
    CUSTOMER = "customer"


class BookingStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED_TO_COMPANY = "assigned_to_company"
    ASSIGNED_TO_MEMBER = "assigned_to_member"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class ServiceCategoryType(str, Enum):
    THERAPY = "therapy"
    SPA = "spa"
