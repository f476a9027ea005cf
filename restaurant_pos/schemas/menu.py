"""Menu API schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Category creation payload."""

    name: str
    name_ar: str
    display_order: int = 0
    is_active: bool = True


class CategoryResponse(CategoryCreate):
    """Serialized category."""

    id: int

    model_config = ConfigDict(from_attributes=True)


class MenuItemCreate(BaseModel):
    """Menu item creation payload."""

    name: str
    name_ar: str
    category_id: int | None = None
    price: Decimal = Field(ge=0)
    cost_price: Decimal | None = Field(default=None, ge=0)
    is_available: bool = True
    image: str | None = None
    color: str | None = None


class MenuItemResponse(MenuItemCreate):
    """Serialized menu item."""

    id: int
    order_count: int

    model_config = ConfigDict(from_attributes=True)
