"""Font registration for Arabic-capable ReportLab tickets."""

from __future__ import annotations

import logging
from pathlib import Path

from restaurant_pos.core.config import settings

logger = logging.getLogger(__name__)

TICKET_FONT_NAME = "TicketUnicode"
FALLBACK_FONT_NAME = "Helvetica"

# Fonts with Arabic glyphs, in order of preference.
SYSTEM_FONT_CANDIDATES: tuple[str, ...] = (
    "/usr/share/fonts/truetype/noto/NotoNaskhArabic-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansArabic-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    r"C:\Windows\Fonts\tahoma.ttf",
    r"C:\Windows\Fonts\arial.ttf",
)

_missing_font_logged = False


def find_ticket_font() -> Path | None:
    """Return the configured font file, else the first installed candidate."""
    if settings.ticket_font_path:
        configured = Path(settings.ticket_font_path)
        if configured.is_file():
            return configured
        logger.warning("Configured ticket font %s does not exist", configured)

    return next((Path(path) for path in SYSTEM_FONT_CANDIDATES if Path(path).is_file()), None)


def register_pdf_font() -> str:
    """Register the ticket font once and return the name to use in styles."""
    global _missing_font_logged

    font_path = find_ticket_font()
    if font_path is None:
        if not _missing_font_logged:
            logger.warning("No Arabic-capable TTF font found; Arabic tickets will print as boxes.")
            _missing_font_logged = True
        return FALLBACK_FONT_NAME

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if TICKET_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(TICKET_FONT_NAME, str(font_path)))
    return TICKET_FONT_NAME
