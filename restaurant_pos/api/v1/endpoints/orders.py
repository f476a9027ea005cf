"""Order endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from restaurant_pos.api.deps import get_station, http_error
from restaurant_pos.core.errors import PosError
from restaurant_pos.db.session import get_db
from restaurant_pos.models.order import Order, OrderItem
from restaurant_pos.schemas.order import (
    OrderCreate,
    OrderDetailResponse,
    OrderItemCreate,
    OrderItemResponse,
    OrderSummaryResponse,
    StatusUpdate,
)
from restaurant_pos.services import order_service
from restaurant_pos.services.station import StationContext

router: APIRouter = APIRouter()


@router.get("", response_model=list[OrderSummaryResponse])
def list_orders(
    limit: int = Query(default=order_service.DEFAULT_LIST_LIMIT, ge=1, le=order_service.DEFAULT_LIST_LIMIT),
    db: Session = Depends(get_db),
) -> list[Order]:
    """Return the most recent orders without their lines."""
    return order_service.list_orders(db, limit=limit)


@router.get("/active", response_model=list[OrderSummaryResponse])
def list_active_orders(db: Session = Depends(get_db)) -> list[Order]:
    return order_service.list_active_orders(db)


@router.post("", response_model=OrderDetailResponse, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)) -> Order:
    try:
        order = order_service.create_order(db, **payload.model_dump())
        return order_service.get_order(db, order.id)
    except PosError as exc:
        raise http_error(exc) from exc


@router.get("/{order_id}", response_model=OrderDetailResponse)
def read_order(order_id: int, db: Session = Depends(get_db)) -> Order:
    try:
        return order_service.get_order(db, order_id)
    except PosError as exc:
        raise http_error(exc) from exc


@router.post("/{order_id}/items", response_model=OrderItemResponse, status_code=201)
def add_order_item(
    order_id: int,
    payload: OrderItemCreate,
    db: Session = Depends(get_db),
    station: StationContext = Depends(get_station),
) -> OrderItem:
    """Add a menu item to an order, pricing it with the station tax rate."""
    try:
        return order_service.add_order_item(
            db,
            order_id,
            menu_item_id=payload.menu_item_id,
            quantity=payload.quantity,
            notes=payload.notes,
            tax_rate=station.get_settings().tax_rate,
        )
    except PosError as exc:
        raise http_error(exc) from exc


@router.patch("/{order_id}/status", response_model=OrderSummaryResponse)
def update_order_status(order_id: int, payload: StatusUpdate, db: Session = Depends(get_db)) -> Order:
    try:
        return order_service.set_order_status(db, order_id, payload.status)
    except PosError as exc:
        raise http_error(exc) from exc


@router.patch("/{order_id}/items/{item_id}/status", response_model=OrderItemResponse)
def update_order_item_status(
    order_id: int,
    item_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    station: StationContext = Depends(get_station),
) -> OrderItem:
    try:
        return order_service.set_order_item_status(
            db,
            order_id,
            item_id,
            payload.status,
            tax_rate=station.get_settings().tax_rate,
        )
    except PosError as exc:
        raise http_error(exc) from exc
