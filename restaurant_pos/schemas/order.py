"""Order API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from restaurant_pos.schemas.payment import PaymentResponse


class OrderCreate(BaseModel):
    """Checkout initiation payload."""

    order_type: str = "dine_in"
    table_id: int | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None
    notes: str | None = None
    kitchen_notes: str | None = None


class OrderItemCreate(BaseModel):
    """Menu item to add to an order."""

    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    notes: str | None = None


class StatusUpdate(BaseModel):
    """New order or order line status."""

    status: str


class OrderItemResponse(BaseModel):
    """Serialized order line."""

    id: int
    order_id: int
    menu_item_id: int
    menu_item_name: str
    quantity: int
    unit_price: Decimal
    status: str
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderSummaryResponse(BaseModel):
    """Serialized order without lines, as returned by listings."""

    id: int
    order_number: str
    table_id: int | None = None
    order_type: str
    status: str
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    paid_amount: Decimal
    payment_status: str
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None
    notes: str | None = None
    kitchen_notes: str | None = None
    created_at: datetime
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderDetailResponse(OrderSummaryResponse):
    """Serialized order with its lines and payments."""

    items: list[OrderItemResponse]
    payments: list[PaymentResponse]
