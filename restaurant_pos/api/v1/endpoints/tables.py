"""Dining table endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_pos.api.deps import http_error
from restaurant_pos.core.errors import PosError
from restaurant_pos.db.session import get_db
from restaurant_pos.models.table import DiningTable
from restaurant_pos.schemas.order import StatusUpdate
from restaurant_pos.schemas.table import TableCreate, TableResponse
from restaurant_pos.services import table_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[TableResponse])
def list_tables(db: Session = Depends(get_db)) -> list[DiningTable]:
    return table_service.list_tables(db)


@router.post("", response_model=TableResponse, status_code=201)
def create_table(payload: TableCreate, db: Session = Depends(get_db)) -> DiningTable:
    try:
        return table_service.create_table(db, **payload.model_dump())
    except PosError as exc:
        raise http_error(exc) from exc


@router.patch("/{table_id}/status", response_model=TableResponse)
def update_table_status(table_id: int, payload: StatusUpdate, db: Session = Depends(get_db)) -> DiningTable:
    try:
        return table_service.set_table_status(db, table_id, payload.status)
    except PosError as exc:
        raise http_error(exc) from exc
