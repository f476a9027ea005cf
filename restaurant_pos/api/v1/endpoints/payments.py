"""Payment endpoints nested under orders."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_pos.api.deps import http_error
from restaurant_pos.core.errors import PosError
from restaurant_pos.db.session import get_db
from restaurant_pos.models.payment import Payment
from restaurant_pos.schemas.payment import PaymentCreate, PaymentResponse
from restaurant_pos.services.payment_service import list_payments, record_payment

router: APIRouter = APIRouter()


@router.post("/{order_id}/payments", response_model=PaymentResponse, status_code=201)
def create_payment(order_id: int, payload: PaymentCreate, db: Session = Depends(get_db)) -> Payment:
    """Record a payment; rejected payments leave the order untouched."""
    try:
        return record_payment(
            db,
            order_id,
            method=payload.method,
            amount=payload.amount,
            tendered=payload.cash_tendered,
        )
    except PosError as exc:
        raise http_error(exc) from exc


@router.get("/{order_id}/payments", response_model=list[PaymentResponse])
def read_payments(order_id: int, db: Session = Depends(get_db)) -> list[Payment]:
    try:
        return list_payments(db, order_id)
    except PosError as exc:
        raise http_error(exc) from exc
