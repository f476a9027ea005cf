"""Order and order line status transition helpers."""

from __future__ import annotations

from datetime import datetime

from restaurant_pos.core.errors import InvalidTransitionError, ValidationError
from restaurant_pos.models.order import Order

ORDER_STATUSES: list[str] = ["pending", "preparing", "ready", "completed", "cancelled"]
TERMINAL_ORDER_STATUSES: frozenset[str] = frozenset({"completed", "cancelled"})

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"preparing", "cancelled"},
    "preparing": {"ready", "cancelled"},
    "ready": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

ORDER_ITEM_STATUSES: list[str] = ["pending", "preparing", "ready", "cancelled"]

ALLOWED_ITEM_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"preparing", "cancelled"},
    "preparing": {"ready", "cancelled"},
    "ready": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def can_transition_item(current: str, new: str) -> bool:
    """Return whether an order line can move from current to new status."""
    return new in ALLOWED_ITEM_TRANSITIONS.get(current, set())


def ensure_transition(current: str, new: str) -> None:
    if new not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status {new!r}")
    if not can_transition(current, new):
        raise InvalidTransitionError(f"Order cannot move from {current} to {new}")


def ensure_item_transition(current: str, new: str) -> None:
    if new not in ORDER_ITEM_STATUSES:
        raise ValidationError(f"Unknown order item status {new!r}")
    if not can_transition_item(current, new):
        raise InvalidTransitionError(f"Order item cannot move from {current} to {new}")


def set_status(order: Order, new_status: str, now: datetime) -> None:
    """Set status and stamp the terminal timestamp in the same update."""
    order.status = new_status

    if new_status == "completed":
        order.completed_at = now
    elif new_status == "cancelled":
        order.cancelled_at = now
