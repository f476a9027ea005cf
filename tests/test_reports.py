"""Dashboard stats tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from restaurant_pos.db.schema import ensure_schema
from restaurant_pos.services import order_service, payment_service
from restaurant_pos.services.menu_service import create_menu_item
from restaurant_pos.services.report_service import get_stats
from restaurant_pos.utils.time import day_bounds

SERVICE_TIME = datetime(2026, 6, 12, 20, 15, tzinfo=timezone.utc)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_stats_count_orders_and_paid_revenue(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "reports.db")
    ensure_schema(engine)
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with session_local() as session:
        dish = create_menu_item(session, name="Mezze", name_ar="مقبلات", price=Decimal("8.00"))
        create_menu_item(session, name="Off menu", name_ar="غير متاح", price=Decimal("3.00"), is_available=False)

        paid_today = order_service.create_order(session, now=SERVICE_TIME)
        order_service.add_order_item(session, paid_today.id, menu_item_id=dish.id, tax_rate=0)
        payment_service.record_payment(session, paid_today.id, method="card", amount="8.00")

        paid_last_week = order_service.create_order(session, now=SERVICE_TIME - timedelta(days=7))
        order_service.add_order_item(session, paid_last_week.id, menu_item_id=dish.id, quantity=2, tax_rate=0)
        payment_service.record_payment(session, paid_last_week.id, method="cash", amount="16.00")
        order_service.set_order_status(session, paid_last_week.id, "preparing")
        order_service.set_order_status(session, paid_last_week.id, "ready")
        order_service.set_order_status(session, paid_last_week.id, "completed")

        refunded = order_service.create_order(session, now=SERVICE_TIME + timedelta(minutes=5))
        order_service.add_order_item(session, refunded.id, menu_item_id=dish.id, tax_rate=0)
        payment_service.record_payment(session, refunded.id, method="card", amount="8.00")
        order_service.set_order_status(session, refunded.id, "cancelled")

        stats = get_stats(session, now=SERVICE_TIME)

    assert stats.total_orders == 3
    assert stats.today_orders == 2
    assert stats.active_orders == 1
    assert stats.available_menu_items == 1
    assert stats.total_revenue == Decimal("24.00")
    assert stats.today_revenue == Decimal("8.00")


def test_day_bounds_normalises_to_utc() -> None:
    cairo_evening = datetime(2026, 6, 13, 1, 30, tzinfo=timezone(timedelta(hours=3)))

    start, end = day_bounds(cairo_evening)

    assert start == datetime(2026, 6, 12, tzinfo=timezone.utc)
    assert end - start == timedelta(days=1)
