"""Application models package."""

from restaurant_pos.models.app_setting import AppSetting
from restaurant_pos.models.menu import Category, MenuItem
from restaurant_pos.models.order import Order, OrderItem
from restaurant_pos.models.payment import Payment
from restaurant_pos.models.table import DiningTable

__all__ = ["AppSetting", "Category", "MenuItem", "Order", "OrderItem", "Payment", "DiningTable"]
