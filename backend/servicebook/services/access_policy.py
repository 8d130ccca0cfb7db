# backend/servicebook/services/access_policy.py
"""
Booking access rules.

One function per operation, each taking the caller (Principal) and the
booking. Company-scope checks live here as well, so routers only need the
coarse role guard from dependencies.require_roles.

Platform admins are company admins of the operator company
(settings.platform_company_slug); they act across all companies.
"""

from dataclasses import dataclass
from typing import Optional

from ..enums import BookingStatus, Role
from ..models import Booking
from .errors import ForbiddenError

MEMBER_ALLOWED_STATUSES = frozenset({
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
    BookingStatus.COMPLETED,
})


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role
    company_id: Optional[int] = None
    email: Optional[str] = None
    is_platform_admin: bool = False

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @property
    def can_act_platform_wide(self) -> bool:
        return self.is_super_admin or (
            self.role == Role.COMPANY_ADMIN and self.is_platform_admin
        )


def _same_company(principal: Principal, company_id: Optional[int]) -> bool:
    return principal.company_id is not None and principal.company_id == company_id


def check_company_scope(principal: Principal, company_id: int) -> None:
    """Caller must belong to `company_id` unless acting platform-wide."""
    if principal.can_act_platform_wide:
        return
    if not _same_company(principal, company_id):
        raise ForbiddenError("Access denied: Company scope violation")


def check_list_all_bookings(principal: Principal) -> None:
    if not principal.can_act_platform_wide:
        raise ForbiddenError("Access denied")


def check_booking_access(booking: Booking, principal: Principal) -> None:
    # platform-wide callers see every booking, including unassigned requests
    if principal.can_act_platform_wide:
        return

    if booking.customer_id == principal.user_id:
        return

    if principal.role == Role.COMPANY_ADMIN and _same_company(principal, booking.assigned_company_id):
        return

    if principal.role == Role.MEMBER and booking.assigned_user_id == principal.user_id:
        return

    raise ForbiddenError("You do not have access to this booking")


def check_status_update_permission(
    booking: Booking,
    principal: Principal,
    new_status: BookingStatus,
) -> None:
    if principal.is_super_admin:
        return

    if principal.role == Role.COMPANY_ADMIN:
        if principal.is_platform_admin or _same_company(principal, booking.assigned_company_id):
            return
        raise ForbiddenError("Booking is not assigned to your company")

    if principal.role == Role.MEMBER and booking.assigned_user_id == principal.user_id:
        if BookingStatus(new_status) not in MEMBER_ALLOWED_STATUSES:
            raise ForbiddenError(
                "You can only update status to confirmed, in_progress, or completed"
            )
        return

    raise ForbiddenError("You do not have permission to update this booking status")


def check_cancel_permission(booking: Booking, principal: Principal) -> None:
    if principal.role == Role.MEMBER:
        raise ForbiddenError("Members do not have permission to cancel bookings")

    if not principal.is_super_admin and booking.customer_id != principal.user_id:
        raise ForbiddenError("You can only cancel your own bookings")


def check_assign_permission(principal: Principal) -> None:
    if principal.role not in (Role.SUPER_ADMIN, Role.COMPANY_ADMIN):
        raise ForbiddenError("Access denied")


def resolve_assignment_company(
    principal: Principal,
    requested_company_id: Optional[int],
) -> Optional[int]:
    """Company admins outside the platform company always assign into their own company."""
    if principal.can_act_platform_wide:
        return requested_company_id
    return principal.company_id


def check_member_assignment(booking: Booking, principal: Principal) -> None:
    if principal.role != Role.COMPANY_ADMIN or principal.company_id is None:
        raise ForbiddenError("Access denied")
    if booking.assigned_company_id != principal.company_id:
        raise ForbiddenError("Booking is not assigned to your company")
