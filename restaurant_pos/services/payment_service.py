"""Payment recording and order settlement reconciliation."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from restaurant_pos.core.errors import InvalidTransitionError, ValidationError
from restaurant_pos.db.session import write_transaction
from restaurant_pos.models.order import Order
from restaurant_pos.models.payment import Payment
from restaurant_pos.services.order_service import get_order, resolve_payment_status
from restaurant_pos.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)

PAYMENT_METHODS: list[str] = ["cash", "card", "other"]


def record_payment(
    db: Session,
    order_id: int,
    *,
    method: str,
    amount: Decimal | int | float | str,
    tendered: Decimal | int | float | str | None = None,
) -> Payment:
    """Append a payment and reconcile the order's paid amount and status.

    All validation happens before the first write; the insert and the order
    update are committed together.
    """
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"Unknown payment method {method!r}")
    paid: Decimal = to_money(amount)
    if paid <= ZERO:
        raise ValidationError("Payment amount must be positive")

    cash_tendered: Decimal | None = None
    change: Decimal | None = None
    if tendered is not None:
        if method != "cash":
            raise ValidationError("Tendered amount only applies to cash payments")
        cash_tendered = to_money(tendered)
        if cash_tendered < paid:
            raise ValidationError(f"Tendered {cash_tendered} is less than amount due {paid}")
        change = cash_tendered - paid

    order: Order = get_order(db, order_id)
    if order.status == "cancelled":
        raise InvalidTransitionError(f"Order {order.order_number} is cancelled")

    with write_transaction(db, f"Recording payment for order {order.order_number}"):
        payment = Payment(method=method, amount=paid, cash_tendered=cash_tendered, change_amount=change)
        order.payments.append(payment)
        db.flush()
        paid_total = (
            db.query(func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.order_id == order.id)
            .scalar()
        )
        order.paid_amount = to_money(paid_total)
        order.payment_status = resolve_payment_status(order.paid_amount, order.total)
    db.refresh(payment)
    logger.info(
        "Order %s: %s payment %s, paid %s of %s (%s)",
        order.order_number,
        method,
        paid,
        order.paid_amount,
        order.total,
        order.payment_status,
    )
    return payment


def list_payments(db: Session, order_id: int) -> list[Payment]:
    """Return an order's payments in the order they were recorded."""
    order: Order = get_order(db, order_id)
    return list(order.payments)
