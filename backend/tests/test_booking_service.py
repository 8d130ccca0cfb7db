import json
from datetime import date

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from servicebook.dependencies import principal_from_user
from servicebook.enums import Role
from servicebook.schemas.bookings import (
    BookingAssign,
    BookingAssignMember,
    BookingCreate,
    BookingListQuery,
    BookingServiceItem,
    BookingStatusUpdate,
)
from servicebook.services.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
)
from servicebook.services import scheduling

DAY = date(2030, 1, 1)


@pytest.fixture
def world(make_company, make_user, make_service):
    company = make_company()
    other = make_company(name="Other Co", slug="other")
    return {
        "company": company,
        "other": other,
        "service": make_service(),
        "customer": make_user(Role.CUSTOMER),
        "super": make_user(Role.SUPER_ADMIN),
        "admin": make_user(Role.COMPANY_ADMIN, company),
        "member": make_user(Role.MEMBER, company),
        "outsider": make_user(Role.MEMBER, other),
    }


def order(service, booking_time="09:00", booking_date=DAY, **item):
    return BookingCreate(
        services=[BookingServiceItem(service_id=service.id, **item)],
        booking_date=booking_date,
        booking_time=booking_time,
    )


def p(user):
    return principal_from_user(user)


# ── Create ───────────────────────────────────────────────────────────────

def test_create_booking(booking_service, world, redis):
    booking = booking_service.create_booking(order(world["service"]), world["customer"].id)

    assert booking.status == "pending"
    assert booking.payment_status == "pending"
    assert booking.duration == 60
    assert booking.total_price == 50.0
    assert [line.service_id for line in booking.services] == [world["service"].id]

    queue, raw = redis.rpush.call_args.args
    assert queue == "events:p2p"
    assert json.loads(raw)["type"] == "booking_created"


def test_overlapping_booking_rejected(booking_service, world):
    booking_service.create_booking(order(world["service"], "09:00"), world["customer"].id)

    with pytest.raises(BadRequestError) as exc:
        booking_service.create_booking(order(world["service"], "09:30"), world["customer"].id)
    assert exc.value.detail == "Time slot conflicts with existing booking"

    booking_service.create_booking(order(world["service"], "10:00"), world["customer"].id)


def test_half_hour_add_on_clashes_with_morning_slot(booking_service, world, make_service):
    visit = make_service(name="Home visit", duration=60, price=100.0)
    touch_up = make_service(name="Touch up", duration=30, price=20.0)

    booking = booking_service.create_booking(order(visit), world["customer"].id)
    assert (booking.total_price, booking.duration, booking.status) == (100.0, 60, "pending")

    with pytest.raises(BadRequestError):
        booking_service.create_booking(order(touch_up, "09:30"), world["customer"].id)


def test_cancelled_booking_frees_slot(booking_service, world):
    first = booking_service.create_booking(order(world["service"]), world["customer"].id)
    booking_service.cancel_booking(first.id, p(world["customer"]))

    booking_service.create_booking(order(world["service"]), world["customer"].id)


def test_past_booking_rejected(booking_service, world):
    with pytest.raises(BadRequestError) as exc:
        booking_service.create_booking(
            order(world["service"], booking_date=date(2020, 1, 1)), world["customer"].id
        )
    assert exc.value.detail == "Booking date must be in the future"


def test_same_day_earlier_time_rejected(booking_service, world):
    # clock is 2029-06-01 12:00
    with pytest.raises(BadRequestError):
        booking_service.create_booking(
            order(world["service"], "11:00", booking_date=date(2029, 6, 1)), world["customer"].id
        )
    booking_service.create_booking(
        order(world["service"], "13:00", booking_date=date(2029, 6, 1)), world["customer"].id
    )


def test_duration_cap(booking_service, world, make_service):
    long = make_service(name="Long", duration=480)
    booking_service.create_booking(order(long), world["customer"].id)

    longer = make_service(name="Longer", duration=481)
    with pytest.raises(BadRequestError) as exc:
        booking_service.create_booking(order(longer, booking_date=date(2030, 1, 2)), world["customer"].id)
    assert exc.value.detail == "Total booking duration cannot exceed 8 hours"


def test_quantity_and_custom_price(booking_service, world):
    booking = booking_service.create_booking(
        order(world["service"], quantity=2, custom_price=40.0), world["customer"].id
    )
    assert booking.duration == 120
    assert booking.total_price == 80.0


def test_company_service_price(booking_service, world, make_company_service):
    cs = make_company_service(world["company"], world["service"], custom_price=45.0)
    booking = booking_service.create_booking(
        order(world["service"], company_service_id=cs.id), world["customer"].id
    )
    assert booking.total_price == 45.0


def test_inactive_service_rejected(booking_service, world, db):
    world["service"].is_active = 0
    db.commit()

    with pytest.raises(NotFoundError) as exc:
        booking_service.create_booking(order(world["service"]), world["customer"].id)
    assert "not found or inactive" in exc.value.detail


def test_unknown_company_service_rejected(booking_service, world):
    with pytest.raises(NotFoundError):
        booking_service.create_booking(
            order(world["service"], company_service_id=999), world["customer"].id
        )


def test_busy_day_lock(booking_service, world, redis):
    redis.lock.return_value.acquire.return_value = False

    with pytest.raises(ConflictError):
        booking_service.create_booking(order(world["service"]), world["customer"].id)


# ── Assign ───────────────────────────────────────────────────────────────

@pytest.fixture
def pending(booking_service, world):
    return booking_service.create_booking(order(world["service"]), world["customer"].id)


def test_assign_to_company(booking_service, world, pending):
    booking = booking_service.assign_booking(
        pending.id, BookingAssign(company_id=world["company"].id), p(world["super"])
    )
    assert booking.status == "assigned_to_company"
    assert booking.assigned_company_id == world["company"].id
    assert booking.assigned_by == world["super"].id


def test_assign_user_infers_company(booking_service, world, pending):
    booking = booking_service.assign_booking(
        pending.id, BookingAssign(user_id=world["member"].id), p(world["super"])
    )
    assert booking.status == "assigned_to_member"
    assert booking.assigned_company_id == world["company"].id
    assert booking.assigned_user_id == world["member"].id


def test_assign_user_outside_company(booking_service, world, pending):
    with pytest.raises(BadRequestError) as exc:
        booking_service.assign_booking(
            pending.id,
            BookingAssign(company_id=world["company"].id, user_id=world["outsider"].id),
            p(world["super"]),
        )
    assert exc.value.detail == "User does not belong to the specified company"


def test_assign_requires_target(booking_service, world, pending):
    with pytest.raises(BadRequestError):
        booking_service.assign_booking(pending.id, BookingAssign(), p(world["super"]))


def test_assign_unknown_company(booking_service, world, pending):
    with pytest.raises(NotFoundError):
        booking_service.assign_booking(pending.id, BookingAssign(company_id=999), p(world["super"]))


def test_company_admin_assigns_into_own_company(booking_service, world, pending):
    booking = booking_service.assign_booking(
        pending.id, BookingAssign(company_id=world["other"].id), p(world["admin"])
    )
    assert booking.assigned_company_id == world["company"].id


def test_cannot_assign_cancelled_booking(booking_service, world, pending):
    booking_service.cancel_booking(pending.id, p(world["customer"]))

    with pytest.raises(BadRequestError):
        booking_service.assign_booking(
            pending.id, BookingAssign(company_id=world["company"].id), p(world["super"])
        )


def test_cannot_reassign_confirmed_booking(booking_service, world, pending):
    booking_service.assign_booking(pending.id, BookingAssign(user_id=world["member"].id), p(world["super"]))
    booking_service.update_booking_status(
        pending.id, BookingStatusUpdate(status="confirmed"), p(world["member"])
    )

    with pytest.raises(BadRequestError):
        booking_service.assign_booking(
            pending.id, BookingAssign(user_id=world["member"].id), p(world["super"])
        )


def test_assign_to_member(booking_service, world, pending):
    booking_service.assign_booking(
        pending.id, BookingAssign(company_id=world["company"].id), p(world["super"])
    )
    booking = booking_service.assign_booking_to_member(
        pending.id, BookingAssignMember(user_id=world["member"].id), p(world["admin"])
    )
    assert booking.status == "assigned_to_member"
    assert booking.assigned_user_id == world["member"].id

    with pytest.raises(BadRequestError):
        booking_service.assign_booking_to_member(
            pending.id, BookingAssignMember(user_id=world["outsider"].id), p(world["admin"])
        )


def test_assign_to_member_other_company_booking(booking_service, world, pending):
    with pytest.raises(ForbiddenError):
        booking_service.assign_booking_to_member(
            pending.id, BookingAssignMember(user_id=world["member"].id), p(world["admin"])
        )


# ── Status / cancel ──────────────────────────────────────────────────────

def test_member_walks_booking_to_completion(booking_service, world, pending):
    booking_service.assign_booking(pending.id, BookingAssign(user_id=world["member"].id), p(world["super"]))

    for status in ("confirmed", "in_progress", "completed"):
        booking = booking_service.update_booking_status(
            pending.id, BookingStatusUpdate(status=status), p(world["member"])
        )
        assert booking.status == status

    with pytest.raises(BadRequestError) as exc:
        booking_service.cancel_booking(pending.id, p(world["customer"]))
    assert exc.value.detail == "Cannot cancel a completed or already cancelled booking"


def test_invalid_transition_leaves_booking_unchanged(booking_service, world, pending):
    with pytest.raises(BadRequestError):
        booking_service.update_booking_status(
            pending.id, BookingStatusUpdate(status="completed", admin_notes="x"), p(world["super"])
        )
    assert booking_service.get_booking(pending.id, p(world["super"])).status == "pending"


def test_member_cannot_update_unassigned_booking(booking_service, world, pending):
    with pytest.raises(ForbiddenError):
        booking_service.update_booking_status(
            pending.id, BookingStatusUpdate(status="confirmed"), p(world["member"])
        )


def test_payment_status_updated_with_status(booking_service, world, pending):
    booking = booking_service.update_booking_status(
        pending.id,
        BookingStatusUpdate(status="cancelled", payment_status="refunded"),
        p(world["super"]),
    )
    assert booking.payment_status == "refunded"


def test_customer_cancels_own_pending_booking(booking_service, world, pending):
    booking = booking_service.cancel_booking(pending.id, p(world["customer"]))
    assert booking.status == "cancelled"


def test_member_cannot_cancel(booking_service, world, pending):
    with pytest.raises(ForbiddenError):
        booking_service.cancel_booking(pending.id, p(world["member"]))


def test_admin_notes_super_admin_only(booking_service, world, pending):
    booking = booking_service.add_admin_notes(pending.id, "call first", p(world["super"]))
    assert booking.admin_notes == "call first"

    with pytest.raises(ForbiddenError):
        booking_service.add_admin_notes(pending.id, "nope", p(world["admin"]))


def test_missing_booking(booking_service, world):
    with pytest.raises(NotFoundError):
        booking_service.get_booking(999, p(world["super"]))


# ── Listings ─────────────────────────────────────────────────────────────

def test_listings(booking_service, world, pending):
    booking_service.create_booking(order(world["service"], "12:00"), world["customer"].id)
    booking_service.assign_booking(pending.id, BookingAssign(user_id=world["member"].id), p(world["super"]))

    mine = booking_service.get_my_bookings(world["customer"].id, BookingListQuery())
    assert mine.total == 2

    requests = booking_service.get_booking_requests(BookingListQuery(), p(world["super"]))
    assert requests.total == 1
    assert requests.bookings[0].status == "pending"

    company = booking_service.get_company_assigned_bookings(BookingListQuery(), p(world["admin"]))
    assert [b.id for b in company.bookings] == [pending.id]

    assigned = booking_service.get_assigned_to_me_bookings(world["member"].id, BookingListQuery())
    assert assigned.total == 1

    with pytest.raises(ForbiddenError):
        booking_service.get_all_bookings(BookingListQuery(), p(world["admin"]))


def test_pagination(booking_service, world):
    for hour in range(9, 14):
        booking_service.create_booking(order(world["service"], f"{hour:02d}:00"), world["customer"].id)

    page = booking_service.get_all_bookings(
        BookingListQuery(page=2, limit=2, sort_by="booking_date", sort_order="asc"),
        p(world["super"]),
    )
    assert page.total == 5
    assert len(page.bookings) == 2
    assert page.page == 2


def test_search_by_customer_email(booking_service, world, pending):
    found = booking_service.get_all_bookings(
        BookingListQuery(search=world["customer"].email[:5]), p(world["super"])
    )
    assert found.total == 1
    missing = booking_service.get_all_bookings(BookingListQuery(search="nobody"), p(world["super"]))
    assert missing.total == 0


def test_company_members(booking_service, world):
    members = booking_service.get_company_members(world["company"].id)
    assert [m.id for m in members] == [world["member"].id]

    with pytest.raises(ForbiddenError):
        booking_service.get_users_by_company(world["company"].id, p(world["admin"]))


def test_redis_down_fails_with_typed_error(booking_service, world, redis):
    redis.lock.return_value.acquire.side_effect = RedisConnectionError("down")

    with pytest.raises(ServiceUnavailableError):
        booking_service.create_booking(order(world["service"]), world["customer"].id)
    assert booking_service.get_my_bookings(world["customer"].id, BookingListQuery()).total == 0


def test_redis_down_fail_open(booking_service, world, redis, monkeypatch):
    monkeypatch.setattr(scheduling.settings, "booking_lock_fail_open", True)
    redis.lock.return_value.acquire.side_effect = RedisConnectionError("down")
    redis.rpush.side_effect = RedisConnectionError("down")

    booking = booking_service.create_booking(order(world["service"]), world["customer"].id)
    assert booking.status == "pending"

    with pytest.raises(BadRequestError):
        booking_service.create_booking(order(world["service"], "09:30"), world["customer"].id)


def test_events_use_the_service_redis(booking_service, world, redis, pending):
    booking_service.cancel_booking(pending.id, p(world["customer"]))

    types = [json.loads(c.args[1])["type"] for c in redis.rpush.call_args_list]
    assert types == ["booking_created", "booking_cancelled"]
