# backend/servicebook/services/bookings.py
"""
Booking lifecycle service.

Owns every booking mutation:
1. create: validate services, price, duration cap, slot conflicts
2. assign: bind to a company and/or member
3. status: role check, then state-machine check
4. cancel: ownership check, then terminal check

A rejected call leaves the booking unchanged.
"""

import logging
from datetime import datetime, time
from typing import Callable, Optional

from redis import Redis
from sqlalchemy.orm import Session

from ..config import settings
from ..enums import BookingStatus, PaymentStatus
from ..models import Booking, BookingServiceLine, User
from ..schemas.bookings import (
    BookingAssign,
    BookingAssignMember,
    BookingCreate,
    BookingListQuery,
    BookingPage,
    BookingRead,
    BookingServiceItem,
    BookingStatusUpdate,
    CompanyMemberRead,
)
from .access_policy import (
    Principal,
    check_assign_permission,
    check_booking_access,
    check_cancel_permission,
    check_list_all_bookings,
    check_member_assignment,
    check_status_update_permission,
    resolve_assignment_company,
)
from .booking_status import can_transition, is_terminal, validate_status_transition
from .errors import BadRequestError, ForbiddenError, NotFoundError
from .events import emit_event
from .pricing import PricedLine, calculate_booking_totals
from .repositories import (
    BookingFilter,
    BookingRepository,
    CatalogRepository,
    DirectoryRepository,
)
from .scheduling import check_scheduling_conflicts, day_lock, time_str_to_minutes

logger = logging.getLogger(__name__)


class BookingService:

    def __init__(
        self,
        db: Session,
        redis: Optional[Redis] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.redis = redis
        self.clock = clock
        self.bookings = BookingRepository()
        self.catalog = CatalogRepository()
        self.directory = DirectoryRepository()

    # ── Create ───────────────────────────────────────────────────────────

    def create_booking(self, data: BookingCreate, customer_id: int) -> Booking:
        start_minutes = time_str_to_minutes(data.booking_time)
        starts_at = datetime.combine(
            data.booking_date, time(start_minutes // 60, start_minutes % 60)
        )
        if starts_at <= self.clock():
            raise BadRequestError("Booking date must be in the future")

        lines = self._validate_and_fetch_services(data.services)
        total_duration, total_price = calculate_booking_totals(lines)

        if total_duration > settings.max_booking_minutes:
            raise BadRequestError(
                f"Total booking duration cannot exceed "
                f"{settings.max_booking_minutes // 60} hours"
            )

        with day_lock(self.redis, data.booking_date):
            check_scheduling_conflicts(
                self.db, data.booking_date, data.booking_time, total_duration
            )

            booking = Booking(
                customer_id=customer_id,
                booking_date=data.booking_date,
                booking_time=data.booking_time,
                duration=total_duration,
                total_price=total_price,
                status=BookingStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                customer_notes=data.customer_notes,
                services=[
                    BookingServiceLine(
                        position=position,
                        service_id=line.service_id,
                        company_service_id=line.company_service_id,
                        quantity=line.quantity,
                        custom_price=line.custom_price,
                    )
                    for position, line in enumerate(lines)
                ],
            )
            booking = self.bookings.create(self.db, booking)

        logger.info(
            f"Booking created: booking_id={booking.id}, customer_id={customer_id}, "
            f"date={booking.booking_date} {booking.booking_time}, "
            f"duration={total_duration}, total={total_price}"
        )
        emit_event("booking_created", {
            "booking_id": booking.id,
            "initiated_by": {"user_id": customer_id, "role": "customer"},
        }, redis=self.redis)
        return booking

    def _validate_and_fetch_services(self, items: list[BookingServiceItem]) -> list[PricedLine]:
        lines = []

        for item in items:
            service = self.catalog.get_service(self.db, item.service_id)
            if not service or not service.is_active:
                raise NotFoundError(f"Service with ID {item.service_id} not found or inactive")

            company_service = None
            if item.company_service_id is not None:
                company_service = self.catalog.get_company_service(self.db, item.company_service_id)
                if not company_service or not company_service.is_active:
                    raise NotFoundError(
                        f"Company service with ID {item.company_service_id} not found or inactive"
                    )

            lines.append(PricedLine(
                service_id=service.id,
                quantity=item.quantity,
                service_duration=service.duration,
                service_price=service.price,
                company_service_id=company_service.id if company_service else None,
                company_service_price=company_service.custom_price if company_service else None,
                custom_price=item.custom_price,
            ))

        return lines

    # ── Read ─────────────────────────────────────────────────────────────

    def get_booking(self, booking_id: int, principal: Principal) -> Booking:
        booking = self._get_or_404(booking_id)
        check_booking_access(booking, principal)
        return booking

    def get_my_bookings(self, customer_id: int, query: BookingListQuery) -> BookingPage:
        flt = BookingFilter(
            status=query.status,
            payment_status=query.payment_status,
            customer_id=customer_id,
        )
        return self._page(flt, query)

    def get_all_bookings(self, query: BookingListQuery, principal: Principal) -> BookingPage:
        check_list_all_bookings(principal)
        flt = BookingFilter(
            status=query.status,
            payment_status=query.payment_status,
            customer_id=query.customer_id,
            assigned_company_id=query.assigned_company_id,
            assigned_user_id=query.assigned_user_id,
            start_date=query.start_date,
            end_date=query.end_date,
            search=query.search,
        )
        return self._page(flt, query)

    def get_booking_requests(self, query: BookingListQuery, principal: Principal) -> BookingPage:
        pending = query.model_copy(update={"status": BookingStatus.PENDING})
        return self.get_all_bookings(pending, principal)

    def get_company_assigned_bookings(self, query: BookingListQuery, principal: Principal) -> BookingPage:
        if principal.is_platform_admin:
            return self.get_all_bookings(query, principal)
        if principal.company_id is None:
            raise BadRequestError("Invalid company ID")

        flt = BookingFilter(status=query.status, assigned_company_id=principal.company_id)
        return self._page(flt, query)

    def get_assigned_to_me_bookings(self, user_id: int, query: BookingListQuery) -> BookingPage:
        flt = BookingFilter(status=query.status, assigned_user_id=user_id)
        return self._page(flt, query)

    def get_company_members(self, company_id: int) -> list[CompanyMemberRead]:
        return [
            CompanyMemberRead(
                id=member.id,
                email=member.email,
                role=member.role,
                is_active=bool(member.is_active),
                company_id=member.company_id,
                company_name=member.company.name if member.company else "",
            )
            for member in self.directory.get_company_members(self.db, company_id)
        ]

    def get_users_by_company(self, company_id: int, principal: Principal) -> list[CompanyMemberRead]:
        if not principal.can_act_platform_wide:
            raise ForbiddenError("Access denied")
        return self.get_company_members(company_id)

    # ── Assign ───────────────────────────────────────────────────────────

    def assign_booking(self, booking_id: int, data: BookingAssign, principal: Principal) -> Booking:
        booking = self._get_or_404(booking_id)
        check_assign_permission(principal)

        company_id = resolve_assignment_company(principal, data.company_id)
        user_id = data.user_id

        if not company_id and not user_id:
            raise BadRequestError("Either company_id or user_id must be provided")

        if company_id:
            if not self.directory.get_company(self.db, company_id):
                raise NotFoundError("Company not found")

        if user_id:
            user = self._get_user_or_404(user_id)
            if company_id and user.company_id != company_id:
                raise BadRequestError("User does not belong to the specified company")
            if not company_id and user.company_id:
                company_id = user.company_id

        new_status = (
            BookingStatus.ASSIGNED_TO_MEMBER if user_id else BookingStatus.ASSIGNED_TO_COMPANY
        )
        self._check_assignment_transition(booking, new_status)

        previous = booking.status
        if company_id:
            booking.assigned_company_id = company_id
        if user_id:
            booking.assigned_user_id = user_id
        booking.assigned_by = principal.user_id
        booking.status = new_status.value
        if data.admin_notes:
            booking.admin_notes = data.admin_notes

        booking = self.bookings.save(self.db, booking)
        self._log_assignment(booking, previous, principal)
        return booking

    def assign_booking_to_member(
        self,
        booking_id: int,
        data: BookingAssignMember,
        principal: Principal,
    ) -> Booking:
        booking = self._get_or_404(booking_id)
        check_member_assignment(booking, principal)

        user = self._get_user_or_404(data.user_id)
        if user.company_id != principal.company_id:
            raise BadRequestError("User does not belong to your company")

        self._check_assignment_transition(booking, BookingStatus.ASSIGNED_TO_MEMBER)

        previous = booking.status
        booking.assigned_user_id = user.id
        booking.assigned_by = principal.user_id
        booking.status = BookingStatus.ASSIGNED_TO_MEMBER.value
        if data.admin_notes:
            booking.admin_notes = data.admin_notes

        booking = self.bookings.save(self.db, booking)
        self._log_assignment(booking, previous, principal)
        return booking

    def _check_assignment_transition(self, booking: Booking, new_status: BookingStatus) -> None:
        if is_terminal(booking.status):
            raise BadRequestError("Cannot assign a completed or cancelled booking")
        if booking.status != new_status.value and not can_transition(booking.status, new_status):
            raise BadRequestError(f"Cannot assign booking in status {booking.status}")

    def _log_assignment(self, booking: Booking, previous: str, principal: Principal) -> None:
        logger.info(
            f"Booking assigned: booking_id={booking.id}, "
            f"company_id={booking.assigned_company_id}, user_id={booking.assigned_user_id}, "
            f"by={principal.user_id}, status {previous} → {booking.status}"
        )
        emit_event("booking_assigned", {
            "booking_id": booking.id,
            "assigned_company_id": booking.assigned_company_id,
            "assigned_user_id": booking.assigned_user_id,
            "initiated_by": {"user_id": principal.user_id, "role": principal.role.value},
        }, redis=self.redis)

    # ── Status ───────────────────────────────────────────────────────────

    def update_booking_status(
        self,
        booking_id: int,
        data: BookingStatusUpdate,
        principal: Principal,
    ) -> Booking:
        booking = self._get_or_404(booking_id)

        check_status_update_permission(booking, principal, data.status)
        validate_status_transition(booking.status, data.status)

        previous = booking.status
        booking.status = data.status.value
        if data.payment_status:
            booking.payment_status = data.payment_status.value
        if data.admin_notes:
            booking.admin_notes = data.admin_notes

        booking = self.bookings.save(self.db, booking)

        logger.info(
            f"Booking status changed: booking_id={booking.id}, "
            f"{previous} → {booking.status}, by={principal.user_id} ({principal.role.value})"
        )
        emit_event("booking_status_changed", {
            "booking_id": booking.id,
            "from": previous,
            "to": booking.status,
            "initiated_by": {"user_id": principal.user_id, "role": principal.role.value},
        }, redis=self.redis)
        return booking

    def add_admin_notes(self, booking_id: int, admin_notes: str, principal: Principal) -> Booking:
        booking = self._get_or_404(booking_id)
        if not principal.is_super_admin:
            raise ForbiddenError("Access denied")

        booking.admin_notes = admin_notes
        return self.bookings.save(self.db, booking)

    # ── Cancel ───────────────────────────────────────────────────────────

    def cancel_booking(self, booking_id: int, principal: Principal) -> Booking:
        booking = self._get_or_404(booking_id)

        check_cancel_permission(booking, principal)
        if is_terminal(booking.status):
            raise BadRequestError("Cannot cancel a completed or already cancelled booking")

        previous = booking.status
        booking.status = BookingStatus.CANCELLED.value
        booking = self.bookings.save(self.db, booking)

        logger.info(
            f"Booking cancelled: booking_id={booking.id}, was {previous}, "
            f"by={principal.user_id} ({principal.role.value})"
        )
        emit_event("booking_cancelled", {
            "booking_id": booking.id,
            "initiated_by": {"user_id": principal.user_id, "role": principal.role.value},
        }, redis=self.redis)
        return booking

    # ── Helpers ──────────────────────────────────────────────────────────

    def _get_or_404(self, booking_id: int) -> Booking:
        booking = self.bookings.get(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def _get_user_or_404(self, user_id: int) -> User:
        user = self.directory.get_user(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _page(self, flt: BookingFilter, query: BookingListQuery) -> BookingPage:
        if flt.status is not None:
            flt.status = BookingStatus(flt.status).value
        if flt.payment_status is not None:
            flt.payment_status = PaymentStatus(flt.payment_status).value

        items, total = self.bookings.find(
            self.db,
            flt,
            page=query.page,
            limit=query.limit,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
        )
        return BookingPage(
            bookings=[BookingRead.from_booking(b) for b in items],
            total=total,
            page=query.page,
            limit=query.limit,
        )
