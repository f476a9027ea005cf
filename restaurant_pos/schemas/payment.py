"""Payment API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class PaymentCreate(BaseModel):
    """Settlement event payload; ``cash_tendered`` applies to cash only."""

    method: str
    amount: Decimal
    cash_tendered: Decimal | None = None


class PaymentResponse(BaseModel):
    """Serialized payment."""

    id: int
    order_id: int
    method: str
    amount: Decimal
    cash_tendered: Decimal | None = None
    change_amount: Decimal | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
