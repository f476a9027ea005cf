"""Station settings schemas."""

from pydantic import BaseModel, Field


class RestaurantSettings(BaseModel):
    """Singleton settings record.

    Field defaults are zero values; the built-in bundle lives in the settings
    service and replaces the whole record when no restaurant name is stored.
    """

    restaurant_name: str = ""
    restaurant_name_ar: str = ""
    currency: str = ""
    tax_rate: float = Field(default=0.0, ge=0, le=1)
    service_charge_rate: float = Field(default=0.0, ge=0, le=1)
    language: str = ""
    theme_color: str = ""
    print_receipt: bool = False
    print_kitchen: bool = False


class LanguagePayload(BaseModel):
    """Active UI language."""

    language: str
