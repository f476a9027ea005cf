"""Order repository: creation, listing, lines, totals and status changes."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session, selectinload

from restaurant_pos.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from restaurant_pos.db.session import write_transaction
from restaurant_pos.models.menu import MenuItem
from restaurant_pos.models.order import Order, OrderItem
from restaurant_pos.models.table import DiningTable
from restaurant_pos.services.order_status import (
    TERMINAL_ORDER_STATUSES,
    ensure_item_transition,
    ensure_transition,
    set_status,
)
from restaurant_pos.utils.money import ZERO, to_money
from restaurant_pos.utils.time import utc_now

logger = logging.getLogger(__name__)

ORDER_TYPES: list[str] = ["dine_in", "takeaway", "delivery"]
DEFAULT_LIST_LIMIT: int = 50
ORDER_NUMBER_PREFIX: str = "ORD-"


def generate_order_number(now: datetime) -> str:
    """Return the timestamp-derived order number for ``now``."""
    return f"{ORDER_NUMBER_PREFIX}{int(now.timestamp())}"


def _next_free_order_number(db: Session, now: datetime) -> str:
    token: int = int(now.timestamp())
    while db.query(Order.id).filter(Order.order_number == f"{ORDER_NUMBER_PREFIX}{token}").first() is not None:
        token += 1
    return f"{ORDER_NUMBER_PREFIX}{token}"


def resolve_payment_status(paid_amount: Decimal, total: Decimal) -> str:
    """Return unpaid, partial or paid for the given amounts."""
    if paid_amount <= ZERO:
        return "unpaid"
    if paid_amount < total:
        return "partial"
    return "paid"


def recalculate_totals(order: Order, tax_rate: float) -> None:
    """Recompute subtotal, tax and total from the non-cancelled lines."""
    subtotal: Decimal = sum(
        (item.unit_price * item.quantity for item in order.items if item.status != "cancelled"),
        ZERO,
    )
    order.subtotal = to_money(subtotal)
    order.tax_amount = to_money(order.subtotal * Decimal(str(tax_rate)))
    order.total = order.subtotal + order.tax_amount


def create_order(
    db: Session,
    *,
    order_type: str = "dine_in",
    table_id: int | None = None,
    customer_name: str | None = None,
    customer_phone: str | None = None,
    customer_address: str | None = None,
    notes: str | None = None,
    kitchen_notes: str | None = None,
    now: datetime | None = None,
) -> Order:
    """Insert a pending order with zeroed money fields and occupy its table."""
    if order_type not in ORDER_TYPES:
        raise ValidationError(f"Unknown order type {order_type!r}")
    table: DiningTable | None = None
    if table_id is not None:
        table = db.get(DiningTable, table_id)
        if table is None:
            raise NotFoundError(f"Table {table_id} not found")

    created_at: datetime = now or utc_now()
    with write_transaction(db, "Creating order"):
        order = Order(
            order_number=_next_free_order_number(db, created_at),
            table_id=table_id,
            order_type=order_type,
            status="pending",
            subtotal=ZERO,
            tax_amount=ZERO,
            total=ZERO,
            paid_amount=ZERO,
            payment_status="unpaid",
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_address=customer_address,
            notes=notes,
            kitchen_notes=kitchen_notes,
            created_at=created_at,
        )
        db.add(order)
        if table is not None:
            table.status = "occupied"
    db.refresh(order)
    logger.info("Created order %s (id=%s)", order.order_number, order.id)
    return order


def list_orders(db: Session, limit: int = DEFAULT_LIST_LIMIT) -> list[Order]:
    """Return the most recent orders, newest first, without loading lines."""
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    return (
        db.query(Order)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(min(limit, DEFAULT_LIST_LIMIT))
        .all()
    )


def list_active_orders(db: Session) -> list[Order]:
    """Return orders that have not reached a terminal status."""
    return (
        db.query(Order)
        .filter(Order.status.notin_(TERMINAL_ORDER_STATUSES))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_order(db: Session, order_id: int) -> Order:
    """Return one order with its lines and payments."""
    order: Order | None = (
        db.query(Order)
        .options(selectinload(Order.items), selectinload(Order.payments))
        .filter(Order.id == order_id)
        .first()
    )
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")
    return order


def add_order_item(
    db: Session,
    order_id: int,
    *,
    menu_item_id: int,
    quantity: int = 1,
    notes: str | None = None,
    tax_rate: float,
) -> OrderItem:
    """Add a line capturing the menu item's current name and price."""
    if quantity < 1:
        raise ValidationError("Quantity must be >= 1")
    order: Order = get_order(db, order_id)
    if order.status in TERMINAL_ORDER_STATUSES:
        raise InvalidTransitionError(f"Order {order.order_number} is {order.status}")
    if order.payment_status == "paid":
        raise ValidationError(f"Order {order.order_number} is already paid")

    menu_item: MenuItem | None = db.get(MenuItem, menu_item_id)
    if menu_item is None:
        raise NotFoundError(f"Menu item {menu_item_id} not found")
    if not menu_item.is_available:
        raise ValidationError(f"Menu item {menu_item.name} is not available")

    with write_transaction(db, f"Adding item to order {order.order_number}"):
        item = OrderItem(
            menu_item_id=menu_item.id,
            menu_item_name=menu_item.name,
            quantity=quantity,
            unit_price=to_money(menu_item.price),
            status="pending",
            notes=notes,
        )
        order.items.append(item)
        menu_item.order_count = (menu_item.order_count or 0) + quantity
        recalculate_totals(order, tax_rate)
        order.payment_status = resolve_payment_status(order.paid_amount, order.total)
    db.refresh(item)
    return item


def apply_tax(db: Session, order_id: int, tax_rate: float) -> Order:
    """Recompute and persist totals with the given tax rate."""
    order: Order = get_order(db, order_id)
    if order.status in TERMINAL_ORDER_STATUSES:
        raise InvalidTransitionError(f"Order {order.order_number} is {order.status}")
    if order.payment_status == "paid":
        raise ValidationError(f"Order {order.order_number} is already paid")
    with write_transaction(db, f"Updating totals of order {order.order_number}"):
        recalculate_totals(order, tax_rate)
        order.payment_status = resolve_payment_status(order.paid_amount, order.total)
    return order


def set_order_status(db: Session, order_id: int, new_status: str, *, now: datetime | None = None) -> Order:
    """Move an order along its lifecycle.

    Status and the terminal timestamp are committed together. Entering a
    terminal status frees the order's table.
    """
    order: Order = get_order(db, order_id)
    ensure_transition(order.status, new_status)

    previous: str = order.status
    with write_transaction(db, f"Updating status of order {order.order_number}"):
        set_status(order, new_status, now or utc_now())
        if new_status in TERMINAL_ORDER_STATUSES and order.table is not None:
            order.table.status = "available"
    logger.info("Order %s: %s -> %s", order.order_number, previous, new_status)
    return order


def set_order_item_status(
    db: Session,
    order_id: int,
    item_id: int,
    new_status: str,
    *,
    tax_rate: float,
) -> OrderItem:
    """Move one order line along its lifecycle; cancelling updates totals."""
    order: Order = get_order(db, order_id)
    item: OrderItem | None = next((line for line in order.items if line.id == item_id), None)
    if item is None:
        raise NotFoundError(f"Order item {item_id} not found on order {order_id}")
    if order.status in TERMINAL_ORDER_STATUSES:
        raise InvalidTransitionError(f"Order {order.order_number} is {order.status}")
    ensure_item_transition(item.status, new_status)

    with write_transaction(db, f"Updating item {item_id} of order {order.order_number}"):
        item.status = new_status
        if new_status == "cancelled":
            recalculate_totals(order, tax_rate)
            order.payment_status = resolve_payment_status(order.paid_amount, order.total)
    return item
