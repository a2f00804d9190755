"""
Fpdf2 implementation of tax invoice rendering.

Paints the drawing operations produced by ``InvoiceLayoutEngine`` onto a
single A4 page. Built-in PDF fonts only cover latin-1, so text outside it
(the rupee sign in particular) is either drawn with a configured Unicode
TTF font or transliterated.
"""

import os

from fpdf import FPDF

from src.config import get_logger, get_settings
from src.config.settings import BillingSettings, PdfSettings
from src.core.entities.bill import Bill
from src.core.entities.invoice_document import (
    InvoiceDocument,
    LineOp,
    RectOp,
    TextAlign,
    TextOp,
)
from src.core.entities.issuer import Issuer
from src.core.services.invoice_layout import IInvoicePdfRenderer, InvoiceLayoutEngine

logger = get_logger(__name__)

BASE_FONT = "Helvetica"
UNICODE_FONT = "InvoiceUnicode"
LINE_WIDTH = 0.5

# Replacements used when no Unicode font is available
_TRANSLITERATIONS = {
    "₹": "Rs.",
    "–": "-",
    "—": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
}


def _is_latin1(text: str) -> bool:
    """Return True if *text* can be drawn with the built-in fonts."""
    try:
        text.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


def _to_latin1(text: str) -> str:
    """Transliterate known symbols, then replace anything else with '?'."""
    for symbol, replacement in _TRANSLITERATIONS.items():
        text = text.replace(symbol, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


class _InvoicePdf(FPDF):
    """Single-page A4 document; the layout places everything itself."""

    def __init__(self) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self.set_auto_page_break(auto=False)
        self.set_margins(0, 0, 0)
        self.set_line_width(LINE_WIDTH)
        self.set_draw_color(0, 0, 0)
        self.set_text_color(0, 0, 0)


class Fpdf2InvoiceRenderer(IInvoicePdfRenderer):
    """Renders tax invoice PDFs using fpdf2."""

    def __init__(
        self,
        pdf_settings: PdfSettings | None = None,
        billing_settings: BillingSettings | None = None,
        layout_engine: InvoiceLayoutEngine | None = None,
    ) -> None:
        if pdf_settings is None or billing_settings is None:
            settings = get_settings()
            pdf_settings = pdf_settings or settings.pdf
            billing_settings = billing_settings or settings.billing
        self._settings = pdf_settings
        self._layout = layout_engine or InvoiceLayoutEngine(billing_settings, pdf_settings)
        self._unicode_styles: set[str] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, bill: Bill, issuer: Issuer) -> bytes:
        """Lay out *bill* and return the PDF bytes.

        Raises:
            RenderError: If the bill, issuer or items are missing.
        """
        document = self._layout.build(bill, issuer)
        pdf_bytes = self.render_document(document)
        logger.info(
            "invoice_rendered",
            bill_number=bill.bill_number,
            size_bytes=len(pdf_bytes),
        )
        return pdf_bytes

    def render_document(self, document: InvoiceDocument) -> bytes:
        """Paint an already laid-out document."""
        pdf = _InvoicePdf()
        self._maybe_load_unicode_font(pdf)
        pdf.add_page()

        for op in document.ops:
            if isinstance(op, TextOp):
                self._draw_text(pdf, op)
            elif isinstance(op, RectOp):
                self._draw_rect(pdf, op)
            elif isinstance(op, LineOp):
                pdf.line(op.x1, op.y1, op.x2, op.y2)

        return bytes(pdf.output())

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------

    def _maybe_load_unicode_font(self, pdf: FPDF) -> None:
        """Register the configured TTF fonts, if any.

        Set ``PDF_UNICODE_FONT_PATH`` to a font covering the rupee sign
        (e.g. NotoSans-Regular.ttf or DejaVuSans.ttf). Without it the sign
        is printed as "Rs.". ``PDF_UNICODE_BOLD_FONT_PATH`` adds the bold
        face; bold text is drawn regular when it is missing.
        """
        self._unicode_styles = set()
        faces = (("", self._settings.unicode_font_path), ("B", self._settings.unicode_bold_font_path))
        for style, font_path in faces:
            if style and "" not in self._unicode_styles:
                return
            if not font_path or not os.path.isfile(font_path):
                continue
            try:
                pdf.add_font(UNICODE_FONT, style, font_path)
                self._unicode_styles.add(style)
            except Exception as e:
                logger.warning("unicode_font_load_failed", path=font_path, style=style, error=str(e))

    def _prepare_text(self, pdf: FPDF, op: TextOp) -> str:
        """Select the font for *op* and return drawable text."""
        if _is_latin1(op.text):
            pdf.set_font(BASE_FONT, op.style, op.size)
            return op.text
        if "" in self._unicode_styles:
            style = op.style if op.style in self._unicode_styles else ""
            pdf.set_font(UNICODE_FONT, style, op.size)
            return op.text
        pdf.set_font(BASE_FONT, op.style, op.size)
        return _to_latin1(op.text)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _draw_text(self, pdf: FPDF, op: TextOp) -> None:
        text = self._prepare_text(pdf, op)
        if not text:
            return
        x = op.x
        if op.align is TextAlign.CENTER:
            x -= pdf.get_string_width(text) / 2
        elif op.align is TextAlign.RIGHT:
            x -= pdf.get_string_width(text)
        pdf.text(x, op.y, text)

    @staticmethod
    def _draw_rect(pdf: FPDF, op: RectOp) -> None:
        if op.filled:
            pdf.set_fill_color(op.fill_gray)
            pdf.rect(op.x, op.y, op.w, op.h, style="F")
        else:
            pdf.rect(op.x, op.y, op.w, op.h)
