"""Dining table helpers."""

from sqlalchemy.orm import Session

from restaurant_pos.core.errors import NotFoundError, ValidationError
from restaurant_pos.db.session import write_transaction
from restaurant_pos.models.table import DiningTable

TABLE_STATUSES: list[str] = ["available", "occupied", "reserved"]


def list_tables(db: Session) -> list[DiningTable]:
    return db.query(DiningTable).order_by(DiningTable.number.asc()).all()


def create_table(db: Session, *, number: str, name: str | None = None, capacity: int = 4) -> DiningTable:
    """Create a table; numbers are unique per station."""
    if db.query(DiningTable.id).filter(DiningTable.number == number).first() is not None:
        raise ValidationError(f"Table number {number} already exists")
    with write_transaction(db, "Creating table"):
        table = DiningTable(number=number, name=name, capacity=capacity, status="available")
        db.add(table)
    db.refresh(table)
    return table


def set_table_status(db: Session, table_id: int, status: str) -> DiningTable:
    """Open, reserve or free a table independently of its orders."""
    if status not in TABLE_STATUSES:
        raise ValidationError(f"Unknown table status {status!r}")
    table: DiningTable | None = db.get(DiningTable, table_id)
    if table is None:
        raise NotFoundError(f"Table {table_id} not found")
    with write_transaction(db, f"Updating table {table.number}"):
        table.status = status
    return table
