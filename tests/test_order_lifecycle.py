"""Order repository and lifecycle tests."""

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from restaurant_pos.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from restaurant_pos.db.schema import ensure_schema
from restaurant_pos.models.menu import MenuItem
from restaurant_pos.models.order import Order
from restaurant_pos.models.table import DiningTable
from restaurant_pos.services import order_service
from restaurant_pos.services.menu_service import create_category, create_menu_item
from restaurant_pos.services.order_status import can_transition, can_transition_item
from restaurant_pos.services.table_service import create_table

TAX_RATE = 0.14
BASE_TIME = datetime(2026, 5, 4, 12, 0, tzinfo=timezone.utc)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _session_factory(db_file: Path) -> sessionmaker:
    engine = _build_test_engine(db_file)
    ensure_schema(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _seed_menu(session) -> tuple[int, int]:
    category = create_category(session, name="Mains", name_ar="أطباق رئيسية")
    burger = create_menu_item(session, name="Burger", name_ar="برجر", price=Decimal("12.50"), category_id=category.id)
    soup = create_menu_item(session, name="Soup", name_ar="شوربة", price=Decimal("4.25"), category_id=category.id)
    return burger.id, soup.id


def _naive(value: datetime) -> datetime:
    return value.replace(tzinfo=None)


def test_create_order_starts_pending_and_zeroed(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_create.db")

    with session_local() as session:
        order = order_service.create_order(session, order_type="takeaway", customer_name="Nadia", now=BASE_TIME)
        order_id = order.id

    with session_local() as session:
        stored = order_service.get_order(session, order_id)
        assert re.fullmatch(r"ORD-\d+", stored.order_number)
        assert stored.order_number == f"ORD-{int(BASE_TIME.timestamp())}"
        assert stored.status == "pending"
        assert stored.payment_status == "unpaid"
        assert stored.subtotal == Decimal("0.00")
        assert stored.total == Decimal("0.00")
        assert stored.paid_amount == Decimal("0.00")
        assert stored.completed_at is None
        assert stored.cancelled_at is None
        assert stored.items == []


def test_order_numbers_stay_unique_within_one_second(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_numbers.db")

    with session_local() as session:
        first = order_service.create_order(session, now=BASE_TIME)
        second = order_service.create_order(session, now=BASE_TIME)

        token = int(BASE_TIME.timestamp())
        assert first.order_number == f"ORD-{token}"
        assert second.order_number == f"ORD-{token + 1}"


def test_create_order_validates_type_and_table(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_create_invalid.db")

    with session_local() as session:
        with pytest.raises(ValidationError):
            order_service.create_order(session, order_type="drive_through")
        with pytest.raises(NotFoundError):
            order_service.create_order(session, table_id=999)
        assert session.query(Order).count() == 0


def test_list_orders_is_newest_first_bounded_and_lightweight(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_list.db")

    with session_local() as session:
        burger_id, _ = _seed_menu(session)
        for offset in range(60):
            order_service.create_order(session, now=BASE_TIME + timedelta(minutes=offset))
        newest = order_service.create_order(session, now=BASE_TIME + timedelta(hours=5))
        order_service.add_order_item(session, newest.id, menu_item_id=burger_id, tax_rate=TAX_RATE)
        newest_id = newest.id

    with session_local() as session:
        orders = order_service.list_orders(session)
        assert len(orders) == 50
        assert orders[0].id == newest_id
        created = [order.created_at for order in orders]
        assert created == sorted(created, reverse=True)
        assert "items" in inspect(orders[0]).unloaded

        assert len(order_service.list_orders(session, limit=5)) == 5
        assert len(order_service.list_orders(session, limit=500)) == 50
        with pytest.raises(ValidationError):
            order_service.list_orders(session, limit=0)


def test_get_order_missing_raises_not_found(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_missing.db")

    with session_local() as session:
        with pytest.raises(NotFoundError):
            order_service.get_order(session, 42)


def test_add_item_snapshots_menu_price_and_recalculates(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_items.db")

    with session_local() as session:
        burger_id, _ = _seed_menu(session)
        order = order_service.create_order(session)
        item = order_service.add_order_item(session, order.id, menu_item_id=burger_id, quantity=2, tax_rate=TAX_RATE)
        order_id, item_id = order.id, item.id

        menu_item = session.get(MenuItem, burger_id)
        menu_item.price = Decimal("20.00")
        menu_item.name = "Double Burger"
        session.commit()

    with session_local() as session:
        stored = order_service.get_order(session, order_id)
        line = stored.items[0]
        assert line.id == item_id
        assert line.menu_item_name == "Burger"
        assert line.unit_price == Decimal("12.50")
        assert line.quantity == 2
        assert line.status == "pending"
        assert stored.subtotal == Decimal("25.00")
        assert stored.tax_amount == Decimal("3.50")
        assert stored.total == Decimal("28.50")
        assert session.get(MenuItem, burger_id).order_count == 2


def test_add_item_rejects_bad_input(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_items_invalid.db")

    with session_local() as session:
        burger_id, soup_id = _seed_menu(session)
        session.get(MenuItem, soup_id).is_available = False
        session.commit()
        order = order_service.create_order(session)

        with pytest.raises(ValidationError):
            order_service.add_order_item(session, order.id, menu_item_id=burger_id, quantity=0, tax_rate=TAX_RATE)
        with pytest.raises(NotFoundError):
            order_service.add_order_item(session, order.id, menu_item_id=999, tax_rate=TAX_RATE)
        with pytest.raises(ValidationError):
            order_service.add_order_item(session, order.id, menu_item_id=soup_id, tax_rate=TAX_RATE)
        with pytest.raises(NotFoundError):
            order_service.add_order_item(session, 999, menu_item_id=burger_id, tax_rate=TAX_RATE)

        order_service.set_order_status(session, order.id, "cancelled")
        with pytest.raises(InvalidTransitionError):
            order_service.add_order_item(session, order.id, menu_item_id=burger_id, tax_rate=TAX_RATE)

        assert order_service.get_order(session, order.id).items == []


def test_apply_tax_recomputes_totals(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_tax.db")

    with session_local() as session:
        burger_id, soup_id = _seed_menu(session)
        order = order_service.create_order(session)
        order_service.add_order_item(session, order.id, menu_item_id=burger_id, tax_rate=0)
        order_service.add_order_item(session, order.id, menu_item_id=soup_id, tax_rate=0)
        assert order_service.get_order(session, order.id).total == Decimal("16.75")

        updated = order_service.apply_tax(session, order.id, 0.10)

        assert updated.subtotal == Decimal("16.75")
        # 1.675 rounds half-up
        assert updated.tax_amount == Decimal("1.68")
        assert updated.total == Decimal("18.43")


def test_order_walks_full_lifecycle(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_lifecycle.db")
    completed_at = BASE_TIME + timedelta(minutes=40)

    with session_local() as session:
        order = order_service.create_order(session, now=BASE_TIME)
        order_service.set_order_status(session, order.id, "preparing")
        order_service.set_order_status(session, order.id, "ready")
        order_service.set_order_status(session, order.id, "completed", now=completed_at)
        order_id = order.id

    with session_local() as session:
        stored = order_service.get_order(session, order_id)
        assert stored.status == "completed"
        assert _naive(stored.completed_at) == _naive(completed_at)
        assert stored.cancelled_at is None


@pytest.mark.parametrize("start_path", [[], ["preparing"], ["preparing", "ready"]])
def test_cancel_is_allowed_from_every_open_status(tmp_path: Path, start_path: list[str]) -> None:
    session_local = _session_factory(tmp_path / f"orders_cancel_{len(start_path)}.db")

    with session_local() as session:
        order = order_service.create_order(session)
        for status in start_path:
            order_service.set_order_status(session, order.id, status)
        order_service.set_order_status(session, order.id, "cancelled")
        order_id = order.id

    with session_local() as session:
        stored = order_service.get_order(session, order_id)
        assert stored.status == "cancelled"
        assert stored.cancelled_at is not None
        assert stored.completed_at is None


def test_illegal_and_unknown_transitions_leave_order_unchanged(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_illegal.db")

    with session_local() as session:
        order = order_service.create_order(session)

        with pytest.raises(InvalidTransitionError):
            order_service.set_order_status(session, order.id, "completed")
        with pytest.raises(InvalidTransitionError):
            order_service.set_order_status(session, order.id, "pending")
        with pytest.raises(ValidationError):
            order_service.set_order_status(session, order.id, "served")
        with pytest.raises(NotFoundError):
            order_service.set_order_status(session, 999, "preparing")

        order_service.set_order_status(session, order.id, "cancelled")
        with pytest.raises(InvalidTransitionError):
            order_service.set_order_status(session, order.id, "preparing")
        order_id = order.id

    with session_local() as session:
        assert order_service.get_order(session, order_id).status == "cancelled"


def test_transition_tables() -> None:
    assert can_transition("pending", "preparing")
    assert can_transition("ready", "completed")
    assert not can_transition("pending", "ready")
    assert not can_transition("completed", "cancelled")
    assert not can_transition("cancelled", "pending")
    assert can_transition_item("pending", "cancelled")
    assert not can_transition_item("ready", "cancelled")


def test_table_is_occupied_then_released_on_terminal_status(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_table.db")

    with session_local() as session:
        table = create_table(session, number="7", name="Window")
        order = order_service.create_order(session, table_id=table.id)
        assert session.get(DiningTable, table.id).status == "occupied"

        order_service.set_order_status(session, order.id, "preparing")
        assert session.get(DiningTable, table.id).status == "occupied"

        order_service.set_order_status(session, order.id, "cancelled")
        assert session.get(DiningTable, table.id).status == "available"


def test_cancelling_a_line_recalculates_totals(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_line_cancel.db")

    with session_local() as session:
        burger_id, soup_id = _seed_menu(session)
        order = order_service.create_order(session)
        order_service.add_order_item(session, order.id, menu_item_id=burger_id, tax_rate=0)
        soup = order_service.add_order_item(session, order.id, menu_item_id=soup_id, tax_rate=0)

        order_service.set_order_item_status(session, order.id, soup.id, "cancelled", tax_rate=0)

        stored = order_service.get_order(session, order.id)
        assert stored.total == Decimal("12.50")
        assert [line.status for line in stored.items] == ["pending", "cancelled"]

        with pytest.raises(InvalidTransitionError):
            order_service.set_order_item_status(session, order.id, soup.id, "preparing", tax_rate=0)
        with pytest.raises(ValidationError):
            order_service.set_order_item_status(session, order.id, soup.id, "eaten", tax_rate=0)
        with pytest.raises(NotFoundError):
            order_service.set_order_item_status(session, order.id, 999, "ready", tax_rate=0)


def test_list_active_orders_skips_terminal_orders(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_active.db")

    with session_local() as session:
        open_order = order_service.create_order(session, now=BASE_TIME)
        cancelled = order_service.create_order(session, now=BASE_TIME + timedelta(minutes=1))
        order_service.set_order_status(session, cancelled.id, "cancelled")

        active = order_service.list_active_orders(session)

        assert [order.id for order in active] == [open_order.id]


def test_order_without_table_has_no_table_relation(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "orders_no_table.db")

    with session_local() as session:
        order = order_service.create_order(session, order_type="takeaway")
        order_service.set_order_status(session, order.id, "cancelled")

        stored = order_service.get_order(session, order.id)
        assert stored.table_id is None
        assert stored.table is None
