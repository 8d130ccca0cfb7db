# backend/servicebook/services/repositories.py
"""Database access used by the booking service."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ..enums import Role
from ..models import Booking, Company, CompanyService, Service, User
from .booking_status import INACTIVE_STATUSES

SORTABLE_FIELDS = {
    "created_at": Booking.created_at,
    "booking_date": Booking.booking_date,
    "total_price": Booking.total_price,
    "status": Booking.status,
}


@dataclass
class BookingFilter:
    status: Optional[str] = None
    payment_status: Optional[str] = None
    customer_id: Optional[int] = None
    assigned_company_id: Optional[int] = None
    assigned_user_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None


class BookingRepository:

    @staticmethod
    def get(db: Session, booking_id: int) -> Optional[Booking]:
        return db.get(Booking, booking_id)

    @staticmethod
    def get_active_on_day(db: Session, booking_date: date) -> list[Booking]:
        """Bookings on the day that still hold their slot."""
        return (
            db.query(Booking)
            .filter(Booking.booking_date == booking_date)
            .filter(Booking.status.notin_([s.value for s in INACTIVE_STATUSES]))
            .all()
        )

    @staticmethod
    def create(db: Session, booking: Booking) -> Booking:
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def save(db: Session, booking: Booking) -> Booking:
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def find(
        db: Session,
        flt: BookingFilter,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> tuple[list[Booking], int]:
        query = db.query(Booking)

        if flt.status:
            query = query.filter(Booking.status == flt.status)
        if flt.payment_status:
            query = query.filter(Booking.payment_status == flt.payment_status)
        if flt.customer_id is not None:
            query = query.filter(Booking.customer_id == flt.customer_id)
        if flt.assigned_company_id is not None:
            query = query.filter(Booking.assigned_company_id == flt.assigned_company_id)
        if flt.assigned_user_id is not None:
            query = query.filter(Booking.assigned_user_id == flt.assigned_user_id)
        if flt.start_date:
            query = query.filter(Booking.booking_date >= flt.start_date)
        if flt.end_date:
            query = query.filter(Booking.booking_date <= flt.end_date)
        if flt.search:
            query = query.join(Booking.customer).filter(
                User.email.ilike(f"%{flt.search}%")
            )

        total = query.count()

        column = SORTABLE_FIELDS.get(sort_by, Booking.created_at)
        order = column.asc() if sort_order == "asc" else column.desc()

        items = (
            query.options(selectinload(Booking.services))
            .order_by(order, Booking.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total


class CatalogRepository:

    @staticmethod
    def get_service(db: Session, service_id: int) -> Optional[Service]:
        return db.get(Service, service_id)

    @staticmethod
    def get_company_service(db: Session, company_service_id: int) -> Optional[CompanyService]:
        return db.get(CompanyService, company_service_id)


class DirectoryRepository:

    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def get_company(db: Session, company_id: int) -> Optional[Company]:
        return db.get(Company, company_id)

    @staticmethod
    def get_company_members(db: Session, company_id: int) -> list[User]:
        return (
            db.query(User)
            .filter(
                User.company_id == company_id,
                User.is_active == 1,
                User.role == Role.MEMBER.value,
            )
            .order_by(User.id)
            .all()
        )
