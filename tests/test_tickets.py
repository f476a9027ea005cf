"""Receipt and kitchen ticket tests."""

import subprocess
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from restaurant_pos.core.config import settings
from restaurant_pos.core.errors import NotFoundError, PrintError, ValidationError
from restaurant_pos.db.schema import ensure_schema
from restaurant_pos.services import order_service, payment_service, ticket_service
from restaurant_pos.services.menu_service import create_menu_item
from restaurant_pos.services.settings_service import default_settings
from restaurant_pos.services.station import StationContext
from restaurant_pos.services.table_service import create_table
from restaurant_pos.utils import pdf_fonts


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _session_factory(db_file: Path) -> sessionmaker:
    engine = _build_test_engine(db_file)
    ensure_schema(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _paid_order(session) -> int:
    table = create_table(session, number="3", name="Patio")
    dish = create_menu_item(session, name="Falafel", name_ar="فلافل", price=Decimal("6.00"))
    order = order_service.create_order(session, table_id=table.id, notes="No onions", kitchen_notes="Extra crispy")
    order_service.add_order_item(session, order.id, menu_item_id=dish.id, quantity=2, notes="Sauce aside", tax_rate=0.14)
    payment_service.record_payment(session, order.id, method="cash", amount="13.68", tendered="20")
    return order.id


class _FakeRun:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[list[str]] = []

    def __call__(self, command, **kwargs):
        self.calls.append(command)
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, 0, b"request id is queued", b"")


def test_printer_for_kind_uses_configured_devices(monkeypatch) -> None:
    monkeypatch.setattr(settings, "receipt_printer", "front-desk")
    monkeypatch.setattr(settings, "kitchen_printer", "line-cook")

    assert ticket_service.printer_for("receipt") == "front-desk"
    assert ticket_service.printer_for("kitchen") == "line-cook"
    with pytest.raises(ValidationError):
        ticket_service.printer_for("invoice")


def test_labels_fall_back_to_english() -> None:
    assert ticket_service.labels_for("ar")["total"] == "الإجمالي"
    assert ticket_service.labels_for("fr") == ticket_service.LABELS["en"]


def test_dispatch_spools_document_and_calls_print_command(tmp_path: Path, monkeypatch) -> None:
    fake_run = _FakeRun()
    monkeypatch.setattr(settings, "print_spool_dir", str(tmp_path / "spool"))
    monkeypatch.setattr(settings, "print_command", "lp")
    monkeypatch.setattr(settings, "kitchen_printer", "kitchen")
    monkeypatch.setattr(ticket_service.subprocess, "run", fake_run)

    path = ticket_service.dispatch("2 x Falafel", "kitchen", name="ORD-1")

    assert path == tmp_path / "spool" / "kitchen-ORD-1.txt"
    assert path.read_text(encoding="utf-8") == "2 x Falafel"
    assert fake_run.calls == [["lp", "-d", "kitchen", str(path)]]


def test_dispatch_failure_raises_print_error_with_document(tmp_path: Path, monkeypatch) -> None:
    failure = subprocess.CalledProcessError(1, ["lp"], output=b"", stderr=b"lp: The printer or class does not exist.")
    monkeypatch.setattr(settings, "print_spool_dir", str(tmp_path))
    monkeypatch.setattr(ticket_service.subprocess, "run", _FakeRun(failure))

    with pytest.raises(PrintError) as exc_info:
        ticket_service.dispatch(b"%PDF-1.4 receipt", "receipt", name="ORD-2")

    assert "does not exist" in str(exc_info.value)
    assert exc_info.value.document_path == str(tmp_path / "receipt-ORD-2.pdf")
    assert Path(exc_info.value.document_path).exists()


def test_dispatch_missing_print_command(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "print_spool_dir", str(tmp_path))
    monkeypatch.setattr(ticket_service.subprocess, "run", _FakeRun(FileNotFoundError("lp")))

    with pytest.raises(PrintError) as exc_info:
        ticket_service.dispatch("hello", "receipt", name="raw")

    assert exc_info.value.document_path == str(tmp_path / "receipt-raw.txt")


def test_render_ticket_produces_pdf_for_both_kinds(tmp_path: Path) -> None:
    pytest.importorskip("reportlab")
    session_local = _session_factory(tmp_path / "tickets_render.db")
    printed_at = datetime(2026, 5, 4, 19, 30, tzinfo=timezone.utc)

    with session_local() as session:
        order = order_service.get_order(session, _paid_order(session))

        for language in ("en", "ar"):
            receipt = ticket_service.render_ticket(order, default_settings(), "receipt", language, printed_at=printed_at)
            kitchen = ticket_service.render_ticket(order, default_settings(), "kitchen", language, printed_at=printed_at)
            assert receipt.startswith(b"%PDF")
            assert kitchen.startswith(b"%PDF")

        with pytest.raises(ValidationError):
            ticket_service.render_ticket(order, default_settings(), "invoice", "en")


def test_render_text_ticket_produces_pdf() -> None:
    pytest.importorskip("reportlab")

    document = ticket_service.render_text_ticket("Table 4 needs water\nTable 9 wants the bill", title="Note")

    assert document.startswith(b"%PDF")


def test_print_order_ticket_dispatches_when_enabled(tmp_path: Path, monkeypatch) -> None:
    pytest.importorskip("reportlab")
    fake_run = _FakeRun()
    monkeypatch.setattr(settings, "print_spool_dir", str(tmp_path / "spool"))
    monkeypatch.setattr(settings, "print_command", "lp")
    monkeypatch.setattr(settings, "receipt_printer", "front-desk")
    monkeypatch.setattr(ticket_service.subprocess, "run", fake_run)
    session_local = _session_factory(tmp_path / "tickets_print.db")

    with session_local() as session:
        order_id = _paid_order(session)
        station = StationContext(default_settings())

        result = ticket_service.print_order_ticket(session, station, order_id, "receipt")

    assert result.printed is True
    assert result.printer == "front-desk"
    assert Path(result.document_path).read_bytes().startswith(b"%PDF")
    assert fake_run.calls[0][:3] == ["lp", "-d", "front-desk"]


def test_disabled_ticket_kind_is_not_printed(tmp_path: Path, monkeypatch) -> None:
    fake_run = _FakeRun()
    monkeypatch.setattr(ticket_service.subprocess, "run", fake_run)
    session_local = _session_factory(tmp_path / "tickets_disabled.db")
    station = StationContext(default_settings().model_copy(update={"print_kitchen": False, "print_receipt": False}))

    with session_local() as session:
        order_id = _paid_order(session)
        kitchen = ticket_service.print_order_ticket(session, station, order_id, "kitchen")

    raw = ticket_service.print_text_ticket(station, "receipt", "Thanks")

    assert kitchen.printed is False
    assert raw.printed is False
    assert fake_run.calls == []


def test_print_order_ticket_for_missing_order(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path / "tickets_missing.db")

    with session_local() as session:
        with pytest.raises(NotFoundError):
            ticket_service.print_order_ticket(session, StationContext(default_settings()), 404, "kitchen")


def test_configured_ticket_font_takes_precedence(tmp_path: Path, monkeypatch) -> None:
    font_file = tmp_path / "Amiri-Regular.ttf"
    font_file.write_bytes(b"\x00\x01\x00\x00")
    monkeypatch.setattr(settings, "ticket_font_path", str(font_file))

    assert pdf_fonts.find_ticket_font() == font_file


def test_missing_configured_font_falls_back_to_system_search(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "ticket_font_path", str(tmp_path / "absent.ttf"))
    monkeypatch.setattr(pdf_fonts, "SYSTEM_FONT_CANDIDATES", ())

    assert pdf_fonts.find_ticket_font() is None
    assert pdf_fonts.register_pdf_font() == pdf_fonts.FALLBACK_FONT_NAME


def test_unnamed_documents_get_distinct_spool_files(tmp_path: Path, monkeypatch) -> None:
    fake_run = _FakeRun()
    monkeypatch.setattr(settings, "print_spool_dir", str(tmp_path))
    monkeypatch.setattr(ticket_service.subprocess, "run", fake_run)

    first = ticket_service.dispatch("Table 2 wants the bill", "receipt")
    second = ticket_service.dispatch("Table 4 wants the bill", "receipt")

    assert first != second
    assert first.read_text(encoding="utf-8") == "Table 2 wants the bill"
    assert second.read_text(encoding="utf-8") == "Table 4 wants the bill"
