"""Dining table API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class TableCreate(BaseModel):
    """Table creation payload."""

    number: str
    name: str | None = None
    capacity: int = Field(default=4, ge=1)


class TableResponse(TableCreate):
    """Serialized table."""

    id: int
    status: str

    model_config = ConfigDict(from_attributes=True)
