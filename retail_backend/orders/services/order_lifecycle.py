# orders/services/order_lifecycle.py

"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities.

    Unpaid --pay-->  Paid    (terminal)
    Unpaid --void--> Voided  (terminal)

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
"""

from core.exceptions import InvalidStateError
from orders.models import Order

# ============================================================
# DOMAIN ERRORS
# ============================================================


class InvalidOrderTransitionError(InvalidStateError):
    """Order cannot make this status transition."""


class OrderNotMutableError(InvalidStateError):
    """Only unpaid orders can be changed."""


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_PAID,
    Order.STATUS_VOIDED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_UNPAID: {
        Order.STATUS_PAID,
        Order.STATUS_VOIDED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def ensure_mutable(order: Order):
    """Lines and coupons may only change while the order is unpaid."""
    if order.status != Order.STATUS_UNPAID:
        raise OrderNotMutableError(f"Order {order.order_number} is {order.status} and read-only.")
