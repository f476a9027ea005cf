"""Receipt and kitchen ticket rendering and dispatch to the OS print queue."""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import Any
from uuid import uuid4
from xml.sax.saxutils import escape

from sqlalchemy.orm import Session

from restaurant_pos.core.config import settings
from restaurant_pos.core.errors import PrintError, ValidationError
from restaurant_pos.models.order import Order
from restaurant_pos.schemas.settings import RestaurantSettings
from restaurant_pos.schemas.ticket import TicketDispatchResponse
from restaurant_pos.services.order_service import get_order
from restaurant_pos.services.station import StationContext
from restaurant_pos.utils.money import ZERO, format_money
from restaurant_pos.utils.pdf_fonts import register_pdf_font
from restaurant_pos.utils.time import utc_now

logger = logging.getLogger(__name__)

TICKET_KINDS: tuple[str, ...] = ("receipt", "kitchen")
TICKET_WIDTH_MM: int = 80
TICKET_HEIGHT_MM: int = 297

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "receipt": "Receipt",
        "kitchen": "KITCHEN ORDER",
        "order_number": "Order #",
        "table": "Table",
        "date": "Date",
        "item": "Item",
        "quantity": "Qty",
        "amount": "Amount",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "total": "Total",
        "paid": "Paid",
        "change": "Change",
        "notes": "Notes",
        "kitchen_notes": "Kitchen Notes",
        "thank_you": "Thank you!",
    },
    "ar": {
        "receipt": "فاتورة",
        "kitchen": "طلب المطبخ",
        "order_number": "طلب رقم",
        "table": "طاولة",
        "date": "التاريخ",
        "item": "العنصر",
        "quantity": "الكمية",
        "amount": "المبلغ",
        "subtotal": "المجموع الفرعي",
        "tax": "الضريبة",
        "total": "الإجمالي",
        "paid": "مدفوع",
        "change": "الباقي",
        "notes": "ملاحظات",
        "kitchen_notes": "ملاحظات المطبخ",
        "thank_you": "شكراً لكم",
    },
}


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.lib.units import mm
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "mm": mm,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def ensure_ticket_kind(kind: str) -> str:
    if kind not in TICKET_KINDS:
        raise ValidationError(f"Unknown ticket kind {kind!r}")
    return kind


def labels_for(language: str) -> dict[str, str]:
    return LABELS.get(language, LABELS["en"])


def printer_for(kind: str) -> str:
    """Return the output device configured for a ticket kind."""
    ensure_ticket_kind(kind)
    return settings.receipt_printer if kind == "receipt" else settings.kitchen_printer


def _build_styles(language: str) -> dict[str, Any]:
    font_name = register_pdf_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    # 2 is right alignment for right-to-left locales.
    alignment = 2 if language == "ar" else 0
    return {
        "font_name": font_name,
        "title": rl["ParagraphStyle"]("TicketTitle", parent=styles["Title"], fontName=font_name, fontSize=14),
        "heading": rl["ParagraphStyle"]("TicketHeading", parent=styles["Heading4"], fontName=font_name, alignment=1),
        "normal": rl["ParagraphStyle"]("TicketNormal", parent=styles["Normal"], fontName=font_name, alignment=alignment),
        "large": rl["ParagraphStyle"](
            "TicketLarge", parent=styles["Normal"], fontName=font_name, fontSize=13, leading=16, alignment=alignment
        ),
        "footer": rl["ParagraphStyle"]("TicketFooter", parent=styles["Normal"], fontName=font_name, fontSize=8, alignment=1),
    }


def _paragraph(text: Any, style: Any) -> Any:
    return _reportlab()["Paragraph"](escape(str(text)), style)


def _build_pdf(story: list[Any]) -> bytes:
    rl = _reportlab()
    mm = rl["mm"]
    buffer = BytesIO()
    rl["SimpleDocTemplate"](
        buffer,
        pagesize=(TICKET_WIDTH_MM * mm, TICKET_HEIGHT_MM * mm),
        leftMargin=4 * mm,
        rightMargin=4 * mm,
        topMargin=4 * mm,
        bottomMargin=4 * mm,
    ).build(story)
    return buffer.getvalue()


def _table(rows: list[list[str]], styles: dict[str, Any], col_widths: list[float]) -> Any:
    rl = _reportlab()
    table = rl["Table"](rows, colWidths=col_widths)
    table.setStyle(
        rl["TableStyle"](
            [
                ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("LINEBELOW", (0, 0), (-1, 0), 0.5, rl["colors"].black),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
            ]
        )
    )
    return table


def _receipt_story(order: Order, restaurant: RestaurantSettings, language: str, printed_at: datetime) -> list[Any]:
    labels = labels_for(language)
    styles = _build_styles(language)
    rl = _reportlab()
    mm = rl["mm"]
    currency = restaurant.currency
    name = restaurant.restaurant_name_ar if language == "ar" and restaurant.restaurant_name_ar else restaurant.restaurant_name

    story: list[Any] = [
        _paragraph(name, styles["title"]),
        _paragraph(f"{labels['receipt']} - {labels['order_number']} {order.order_number}", styles["heading"]),
        _paragraph(f"{labels['date']}: {printed_at:%Y-%m-%d %H:%M}", styles["normal"]),
    ]
    if order.table is not None:
        story.append(_paragraph(f"{labels['table']}: {order.table.name or order.table.number}", styles["normal"]))
    story.append(rl["Spacer"](1, 4))

    rows: list[list[str]] = [[labels["item"], labels["quantity"], labels["amount"]]]
    for item in order.items:
        if item.status == "cancelled":
            continue
        rows.append([item.menu_item_name, str(item.quantity), format_money(item.unit_price * item.quantity)])
    story.append(_table(rows, styles, [40 * mm, 10 * mm, 20 * mm]))
    story.append(rl["Spacer"](1, 4))

    change: Decimal = sum((payment.change_amount or ZERO for payment in order.payments), ZERO)
    totals: list[list[str]] = [
        [labels["subtotal"], format_money(order.subtotal, currency)],
        [labels["tax"], format_money(order.tax_amount, currency)],
        [labels["total"], format_money(order.total, currency)],
    ]
    if order.paid_amount > ZERO:
        totals.append([labels["paid"], format_money(order.paid_amount, currency)])
    if change > ZERO:
        totals.append([labels["change"], format_money(change, currency)])
    story.append(_table(totals, styles, [40 * mm, 30 * mm]))

    if order.notes:
        story.append(_paragraph(f"{labels['notes']}: {order.notes}", styles["normal"]))
    story.append(rl["Spacer"](1, 8))
    story.append(_paragraph(name, styles["footer"]))
    story.append(_paragraph(labels["thank_you"], styles["footer"]))
    return story


def _kitchen_story(order: Order, language: str, printed_at: datetime) -> list[Any]:
    labels = labels_for(language)
    styles = _build_styles(language)
    rl = _reportlab()

    story: list[Any] = [
        _paragraph(labels["kitchen"], styles["heading"]),
        _paragraph(f"#{order.order_number}", styles["title"]),
        _paragraph(f"{printed_at:%H:%M:%S}", styles["heading"]),
    ]
    if order.table is not None:
        story.append(_paragraph(f"{labels['table']}: {order.table.name or order.table.number}", styles["large"]))
    story.append(rl["Spacer"](1, 4))

    for item in order.items:
        if item.status == "cancelled":
            continue
        story.append(_paragraph(f"{item.quantity} x {item.menu_item_name}", styles["large"]))
        if item.notes:
            story.append(_paragraph(f"  - {item.notes}", styles["normal"]))
    if order.kitchen_notes:
        story.append(rl["Spacer"](1, 4))
        story.append(_paragraph(f"{labels['kitchen_notes']}: {order.kitchen_notes}", styles["normal"]))
    return story


def render_ticket(
    order: Order,
    restaurant: RestaurantSettings,
    kind: str,
    language: str,
    *,
    printed_at: datetime | None = None,
) -> bytes:
    """Render a customer receipt or kitchen slip as an 80 mm PDF."""
    ensure_ticket_kind(kind)
    when: datetime = printed_at or utc_now()
    if kind == "receipt":
        return _build_pdf(_receipt_story(order, restaurant, language, when))
    return _build_pdf(_kitchen_story(order, language, when))


def render_text_ticket(content: str, *, title: str | None = None, language: str = "en") -> bytes:
    """Render free text, one paragraph per line."""
    styles = _build_styles(language)
    story: list[Any] = []
    if title:
        story.append(_paragraph(title, styles["heading"]))
    for line in content.splitlines() or [""]:
        story.append(_paragraph(line, styles["normal"]))
    return _build_pdf(story)


def _spool_token() -> str:
    return f"{utc_now():%Y%m%d-%H%M%S}-{uuid4().hex[:8]}"


def dispatch(document: bytes | str, kind: str, *, name: str | None = None) -> Path:
    """Spool a document and send it to the device configured for ``kind``.

    Returns the spooled file path. Raises PrintError without retrying when the
    file cannot be written or the print command fails.
    """
    printer: str = printer_for(kind)
    payload: bytes = document.encode("utf-8") if isinstance(document, str) else document
    suffix: str = ".pdf" if payload.startswith(b"%PDF") else ".txt"
    spool_dir = Path(settings.print_spool_dir)
    path: Path = spool_dir / f"{kind}-{name or _spool_token()}{suffix}"

    try:
        spool_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as exc:
        raise PrintError(f"Could not spool {kind} ticket: {exc}") from exc

    command: list[str] = [settings.print_command, "-d", printer, str(path)]
    try:
        subprocess.run(command, check=True, capture_output=True, timeout=settings.print_timeout_seconds)
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or b"").decode("utf-8", errors="replace").strip() or f"exit status {exc.returncode}"
        logger.warning("Printing %s to %s failed: %s", path.name, printer, detail)
        raise PrintError(f"Printer {printer} rejected the {kind} ticket: {detail}", str(path)) from exc
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.warning("Printing %s to %s failed: %s", path.name, printer, exc)
        raise PrintError(f"Could not reach printer {printer}: {exc}", str(path)) from exc

    logger.info("Sent %s to printer %s", path.name, printer)
    return path


def _printing_enabled(restaurant: RestaurantSettings, kind: str) -> bool:
    return restaurant.print_receipt if kind == "receipt" else restaurant.print_kitchen


def print_order_ticket(db: Session, station: StationContext, order_id: int, kind: str) -> TicketDispatchResponse:
    """Render and print a receipt or kitchen slip unless that kind is disabled."""
    ensure_ticket_kind(kind)
    restaurant: RestaurantSettings = station.get_settings()
    if not _printing_enabled(restaurant, kind):
        return TicketDispatchResponse(kind=kind, printed=False)

    order: Order = get_order(db, order_id)
    document: bytes = render_ticket(order, restaurant, kind, station.get_language())
    path: Path = dispatch(document, kind, name=order.order_number)
    return TicketDispatchResponse(kind=kind, printed=True, printer=printer_for(kind), document_path=str(path))


def print_text_ticket(station: StationContext, kind: str, content: str, *, title: str | None = None) -> TicketDispatchResponse:
    """Print caller-supplied text as a ticket of the given kind."""
    ensure_ticket_kind(kind)
    if not _printing_enabled(station.get_settings(), kind):
        return TicketDispatchResponse(kind=kind, printed=False)

    document: bytes = render_text_ticket(content, title=title, language=station.get_language())
    path: Path = dispatch(document, kind)
    return TicketDispatchResponse(kind=kind, printed=True, printer=printer_for(kind), document_path=str(path))
