# backend/servicebook/routers/bookings.py
# Role guards here are coarse; company/ownership scope is checked in services.access_policy.

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_booking_service, get_principal, require_roles
from ..enums import BookingStatus, PaymentStatus, Role
from ..schemas.bookings import (
    BookingAssign,
    BookingAssignMember,
    BookingCreate,
    BookingListQuery,
    BookingNotesUpdate,
    BookingPage,
    BookingRead,
    BookingStatusUpdate,
    CompanyMemberRead,
)
from ..services.access_policy import Principal
from ..services.bookings import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


def list_query(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[BookingStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    customer_id: Optional[int] = None,
    assigned_company_id: Optional[int] = None,
    assigned_user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    sort_by: Literal["created_at", "booking_date", "total_price", "status"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> BookingListQuery:
    return BookingListQuery(
        page=page,
        limit=limit,
        status=status,
        payment_status=payment_status,
        customer_id=customer_id,
        assigned_company_id=assigned_company_id,
        assigned_user_id=assigned_user_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


# ── Customer ─────────────────────────────────────────────────────────────

@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.create_booking(data, principal.user_id))


@router.get("/my-bookings", response_model=BookingPage)
def get_my_bookings(
    query: BookingListQuery = Depends(list_query),
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_my_bookings(principal.user_id, query)


@router.patch("/{id}/cancel", response_model=BookingRead)
def cancel_booking(
    id: int,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.cancel_booking(id, principal))


# ── Super admin / platform company admins ────────────────────────────────

@router.get("/", response_model=BookingPage)
def list_bookings(
    query: BookingListQuery = Depends(list_query),
    principal: Principal = Depends(require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_all_bookings(query, principal)


@router.get("/requests", response_model=BookingPage)
def list_booking_requests(
    query: BookingListQuery = Depends(list_query),
    principal: Principal = Depends(require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking_requests(query, principal)


@router.patch("/{id}/assign", response_model=BookingRead)
def assign_booking(
    id: int,
    data: BookingAssign,
    principal: Principal = Depends(require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.assign_booking(id, data, principal))


@router.patch("/{id}/status", response_model=BookingRead)
def update_booking_status(
    id: int,
    data: BookingStatusUpdate,
    principal: Principal = Depends(
        require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.MEMBER)
    ),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.update_booking_status(id, data, principal))


@router.patch("/{id}/notes", response_model=BookingRead)
def add_admin_notes(
    id: int,
    data: BookingNotesUpdate,
    principal: Principal = Depends(require_roles(Role.SUPER_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.add_admin_notes(id, data.admin_notes, principal))


@router.get("/users/by-company/{company_id}", response_model=list[CompanyMemberRead])
def get_users_by_company(
    company_id: int,
    principal: Principal = Depends(require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_users_by_company(company_id, principal)


# ── Company admin ────────────────────────────────────────────────────────

@router.get("/company-assigned", response_model=BookingPage)
def get_company_assigned_bookings(
    query: BookingListQuery = Depends(list_query),
    principal: Principal = Depends(require_roles(Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_company_assigned_bookings(query, principal)


@router.patch("/{id}/assign-member", response_model=BookingRead)
def assign_booking_to_member(
    id: int,
    data: BookingAssignMember,
    principal: Principal = Depends(require_roles(Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.assign_booking_to_member(id, data, principal))


@router.get("/users/company-members", response_model=list[CompanyMemberRead])
def get_company_members(
    principal: Principal = Depends(require_roles(Role.COMPANY_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    if principal.company_id is None:
        return []
    return service.get_company_members(principal.company_id)


# ── Member ───────────────────────────────────────────────────────────────

@router.get("/assigned-to-me", response_model=BookingPage)
def get_assigned_to_me_bookings(
    query: BookingListQuery = Depends(list_query),
    principal: Principal = Depends(require_roles(Role.MEMBER)),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_assigned_to_me_bookings(principal.user_id, query)


# Keep last: /{id} would shadow the static GET paths above
@router.get("/{id}", response_model=BookingRead)
def get_booking(
    id: int,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(get_booking_service),
):
    return BookingRead.from_booking(service.get_booking(id, principal))
