# backend/servicebook/services/booking_status.py
"""
Booking status state machine.

    pending ─┬─> assigned_to_company ──> assigned_to_member
             └──────────────────────────> assigned_to_member ──> confirmed
                                                   confirmed ──> in_progress ──> completed

Every non-terminal state may also move to cancelled.
completed and cancelled are terminal.
"""

from ..enums import BookingStatus
from .errors import BadRequestError

S = BookingStatus

VALID_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    S.PENDING: frozenset({S.ASSIGNED_TO_COMPANY, S.ASSIGNED_TO_MEMBER, S.CANCELLED}),
    S.ASSIGNED_TO_COMPANY: frozenset({S.ASSIGNED_TO_MEMBER, S.CANCELLED}),
    S.ASSIGNED_TO_MEMBER: frozenset({S.CONFIRMED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.IN_PROGRESS, S.CANCELLED}),
    S.IN_PROGRESS: frozenset({S.COMPLETED, S.CANCELLED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({S.COMPLETED, S.CANCELLED})

# Bookings in these states no longer hold their time slot
INACTIVE_STATUSES = TERMINAL_STATUSES


def is_terminal(status: str) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def can_transition(current: str, new: str) -> bool:
    return BookingStatus(new) in VALID_TRANSITIONS[BookingStatus(current)]


def validate_status_transition(current: str, new: str) -> None:
    """Raise BadRequestError unless current -> new is an edge of the table."""
    if not can_transition(current, new):
        raise BadRequestError(
            f"Invalid status transition from {BookingStatus(current).value} "
            f"to {BookingStatus(new).value}"
        )
