"""Reporting schemas."""

from decimal import Decimal

from pydantic import BaseModel


class StationStats(BaseModel):
    """Dashboard summary figures."""

    active_orders: int
    available_menu_items: int
    total_orders: int
    today_orders: int
    total_revenue: Decimal
    today_revenue: Decimal
