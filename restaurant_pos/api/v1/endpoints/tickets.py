"""Receipt and kitchen ticket endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_pos.api.deps import get_station, http_error
from restaurant_pos.core.errors import PosError
from restaurant_pos.db.session import get_db
from restaurant_pos.schemas.ticket import RawTicketPayload, TicketDispatchResponse
from restaurant_pos.services.station import StationContext
from restaurant_pos.services.ticket_service import print_order_ticket, print_text_ticket

router: APIRouter = APIRouter()


@router.post("/orders/{order_id}/tickets/{kind}", response_model=TicketDispatchResponse)
def print_ticket_for_order(
    order_id: int,
    kind: str,
    db: Session = Depends(get_db),
    station: StationContext = Depends(get_station),
) -> TicketDispatchResponse:
    """Print a receipt or kitchen slip; a 502 carries the spooled file for manual printing."""
    try:
        return print_order_ticket(db, station, order_id, kind)
    except PosError as exc:
        raise http_error(exc) from exc


@router.post("/tickets/{kind}", response_model=TicketDispatchResponse)
def print_raw_ticket(
    kind: str,
    payload: RawTicketPayload,
    station: StationContext = Depends(get_station),
) -> TicketDispatchResponse:
    try:
        return print_text_ticket(station, kind, payload.content, title=payload.title)
    except PosError as exc:
        raise http_error(exc) from exc
