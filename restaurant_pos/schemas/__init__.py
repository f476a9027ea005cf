"""Schema exports."""

from restaurant_pos.schemas.menu import CategoryCreate, CategoryResponse, MenuItemCreate, MenuItemResponse
from restaurant_pos.schemas.order import (
    OrderCreate,
    OrderDetailResponse,
    OrderItemCreate,
    OrderItemResponse,
    OrderSummaryResponse,
    StatusUpdate,
)
from restaurant_pos.schemas.payment import PaymentCreate, PaymentResponse
from restaurant_pos.schemas.report import StationStats
from restaurant_pos.schemas.settings import LanguagePayload, RestaurantSettings
from restaurant_pos.schemas.table import TableCreate, TableResponse
from restaurant_pos.schemas.ticket import RawTicketPayload, TicketDispatchResponse

__all__ = [
    "CategoryCreate",
    "CategoryResponse",
    "MenuItemCreate",
    "MenuItemResponse",
    "OrderCreate",
    "OrderDetailResponse",
    "OrderItemCreate",
    "OrderItemResponse",
    "OrderSummaryResponse",
    "StatusUpdate",
    "PaymentCreate",
    "PaymentResponse",
    "StationStats",
    "LanguagePayload",
    "RestaurantSettings",
    "TableCreate",
    "TableResponse",
    "RawTicketPayload",
    "TicketDispatchResponse",
]
