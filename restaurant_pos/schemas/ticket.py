"""Ticket dispatch schemas."""

from pydantic import BaseModel


class RawTicketPayload(BaseModel):
    """Free text to print as a ticket."""

    content: str
    title: str | None = None


class TicketDispatchResponse(BaseModel):
    """Outcome of a ticket dispatch."""

    kind: str
    printed: bool
    printer: str | None = None
    document_path: str | None = None
