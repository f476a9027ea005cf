"""Dashboard summary figures."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from restaurant_pos.models.menu import MenuItem
from restaurant_pos.models.order import Order
from restaurant_pos.schemas.report import StationStats
from restaurant_pos.services.order_status import TERMINAL_ORDER_STATUSES
from restaurant_pos.utils.money import to_money
from restaurant_pos.utils.time import day_bounds


def _paid_revenue(db: Session, *filters) -> Decimal:
    revenue = (
        db.query(func.coalesce(func.sum(Order.total), 0))
        .filter(Order.payment_status == "paid", Order.status != "cancelled", *filters)
        .scalar()
    )
    return to_money(revenue)


def get_stats(db: Session, *, now: datetime | None = None) -> StationStats:
    """Return active/total order counts, menu size and paid revenue.

    "Today" is the UTC day containing ``now``.
    """
    start, end = day_bounds(now)
    active_orders: int = db.query(Order).filter(Order.status.notin_(TERMINAL_ORDER_STATUSES)).count()
    total_orders: int = db.query(Order).count()
    today_orders: int = db.query(Order).filter(Order.created_at >= start, Order.created_at < end).count()
    available_items: int = db.query(MenuItem).filter(MenuItem.is_available.is_(True)).count()

    return StationStats(
        active_orders=active_orders,
        available_menu_items=available_items,
        total_orders=total_orders,
        today_orders=today_orders,
        total_revenue=_paid_revenue(db),
        today_revenue=_paid_revenue(db, Order.created_at >= start, Order.created_at < end),
    )
