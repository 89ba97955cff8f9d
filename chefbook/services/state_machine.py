"""Booking state machine: allowed transitions, role limits and strict-mode checks."""
from chefbook.errors import InvalidTransition
from chefbook.models.booking import BookingStatus
from chefbook.models.user import UserRole

# Allowed transitions: from_state -> {to_state, ...}
ALLOWED: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELED: set(),
}

TERMINAL: frozenset[BookingStatus] = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELED})

# Statuses each role may request through the user-facing update
ROLE_SETTABLE: dict[UserRole, frozenset[BookingStatus]] = {
    UserRole.CHEF: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELED}),
    UserRole.CUSTOMER: frozenset(BookingStatus),
}

# Only reachable through complete_booking / the auto-complete task
ADMINISTRATIVE: frozenset[BookingStatus] = frozenset({BookingStatus.COMPLETED})


def is_terminal(status: BookingStatus) -> bool:
    return status in TERMINAL


def check_role(role: UserRole, to_state: BookingStatus) -> None:
    """Raise InvalidTransition if the role may never set to_state."""
    if to_state not in ROLE_SETTABLE.get(role, frozenset()):
        raise InvalidTransition("Invalid status change")


def check_transition(current: BookingStatus, to_state: BookingStatus, *, administrative: bool = False) -> None:
    """
    Enforce the booking graph. User-facing updates may not reach an administrative
    status even when the graph allows it. Raises InvalidTransition.
    """
    if is_terminal(current):
        raise InvalidTransition(f"Booking already {current.value}")
    if to_state not in ALLOWED.get(current, set()):
        raise InvalidTransition(f"Transition {current.value} -> {to_state.value} not allowed")
    if not administrative and to_state in ADMINISTRATIVE:
        raise InvalidTransition(f"Transition {current.value} -> {to_state.value} not allowed")
