"""
Fixed-format tax invoice layout.

Turns a finalized bill and the issuer profile into an ``InvoiceDocument``:
an A4 page of text, rectangle and line operations positioned from a
running vertical cursor. The layout is pure and deterministic; painting
the operations into a PDF is done by an ``IInvoicePdfRenderer``.

Section order: title, issuer/metadata box, party block, item table,
discount row, total row, amount in words, tax table, tax in words, bank
details, signature, footer.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.config import get_logger, get_settings
from src.config.settings import BillingSettings, PdfSettings
from src.core.entities.bill import Bill
from src.core.entities.discount import DiscountType
from src.core.entities.invoice_document import (
    InvoiceDocument,
    InvoiceFigures,
    LineOp,
    RectOp,
    TextAlign,
    TextOp,
)
from src.core.entities.issuer import Issuer
from src.core.exceptions import RenderError
from src.core.services.calculator import tax_inclusive_split
from src.core.services.formatting import (
    format_amount,
    format_currency,
    format_date,
    format_quantity,
    safe_number,
    safe_text,
    truncate,
)
from src.core.services.number_words import amount_in_words

logger = get_logger(__name__)

# Page geometry (mm)
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 15.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
RIGHT_COLUMN_X = PAGE_WIDTH - 80
RIGHT_VALUE_OFFSET = 35.0
HEADER_FILL_GRAY = 240

# Item table
ITEM_HEADERS = ("S.No.", "Name", "Code", "Quantity", "Price", "Amount")
ITEM_COLUMN_WIDTHS = (15.0, 60.0, 25.0, 20.0, 25.0, 30.0)
ITEM_HEADER_HEIGHT = 8.0
ITEM_ROW_HEIGHT = 12.0
MIN_ITEM_ROWS = 8
NAME_MAX_LENGTH = 25
DISCOUNT_ROW_HEIGHT = 8.0
TOTAL_ROW_HEIGHT = 10.0

# Tax table
TAX_HEADERS = ("HSN/SAC", "Taxable Value", "IGST", "Total Tax Amount")
TAX_COLUMN_WIDTHS = (30.0, 40.0, 40.0, 40.0)
TAX_TABLE_WIDTH = sum(TAX_COLUMN_WIDTHS)
TAX_HEADER_HEIGHT = 8.0
TAX_ROW_HEIGHT = 6.0

FOOTER_Y = PAGE_HEIGHT - 20

# Right-hand metadata labels; only the first, second and fourth carry values
INVOICE_DETAIL_LABELS = (
    "Invoice No.",
    "Dated",
    "Delivery Note",
    "Mode/Terms of Payment",
    "Reference No. & Date",
    "Other References",
    "Buyer's Order No.",
    "Dated",
    "Dispatch Doc No.",
    "Delivery Note Date",
)


class IInvoicePdfRenderer(ABC):
    """Interface for painting an invoice into PDF bytes."""

    @abstractmethod
    def render(self, bill: Bill, issuer: Issuer) -> bytes:
        """Lay out and render *bill* for *issuer*."""
        pass


class _Page:
    """Collects drawing operations for one document."""

    def __init__(self, document: InvoiceDocument):
        self._doc = document
        self.size = 8.0
        self.style = ""

    def font(self, style: str = "", size: float | None = None) -> None:
        self.style = style
        if size is not None:
            self.size = size

    def text(self, x: float, y: float, text: str, align: TextAlign = TextAlign.LEFT) -> None:
        self._doc.ops.append(TextOp(x, y, text, self.size, self.style, align))

    def rect(self, x: float, y: float, w: float, h: float, fill_gray: int | None = None) -> None:
        self._doc.ops.append(RectOp(x, y, w, h, fill_gray))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._doc.ops.append(LineOp(x1, y1, x2, y2))

    def column_dividers(self, widths: tuple[float, ...], y: float, h: float, x: float = MARGIN) -> None:
        """Vertical lines after every column except the last."""
        for width in widths[:-1]:
            x += width
            self.line(x, y, x, y + h)


class InvoiceLayoutEngine:
    """Lays out a tax invoice for a finalized bill."""

    def __init__(
        self,
        billing_settings: BillingSettings | None = None,
        pdf_settings: PdfSettings | None = None,
    ):
        if billing_settings is None or pdf_settings is None:
            settings = get_settings()
            billing_settings = billing_settings or settings.billing
            pdf_settings = pdf_settings or settings.pdf
        self._billing = billing_settings
        self._pdf = pdf_settings

    @property
    def currency_symbol(self) -> str:
        return self._billing.currency_symbol

    def build(self, bill: Bill | None, issuer: Issuer | None) -> InvoiceDocument:
        """Lay out the invoice.

        Raises:
            RenderError: If the bill or issuer is missing, or the bill has
                no items. Nothing is produced in that case.
        """
        if bill is None:
            raise RenderError("no bill given")
        if issuer is None:
            raise RenderError("no issuer profile given")
        if not bill.items:
            raise RenderError(f"bill {safe_text(bill.bill_number)} has no items")

        doc = InvoiceDocument(page_width=PAGE_WIDTH, page_height=PAGE_HEIGHT)
        page = _Page(doc)

        y = self._title(page, MARGIN)
        y = self._issuer_box(page, y, bill, issuer)
        y = self._party_block(page, y, bill)
        y, item_amount, item_discount = self._item_table(page, y, bill)

        bill_discount = safe_number(bill.bill_discount_amount)
        y = self._discount_row(page, y, bill, item_discount, bill_discount)

        total = safe_number(bill.total)
        y = self._total_row(page, y, total)
        y, total_words = self._amount_words(page, y, total)

        rate = self._billing.default_tax_rate
        taxable, tax = tax_inclusive_split(total, rate)
        y = self._tax_table(page, y, taxable, tax, rate)
        y, tax_words = self._tax_words(page, y, tax)

        y = self._bank_details(page, y, issuer)
        self._signature(page, y, issuer)
        self._footer(page)

        doc.figures = InvoiceFigures(
            item_amount_total=item_amount,
            item_discount_total=item_discount,
            bill_discount_amount=bill_discount,
            discount_total=item_discount + bill_discount,
            total=total,
            tax_rate=rate,
            taxable_value=taxable,
            tax_amount=tax,
            amount_in_words=total_words,
            tax_in_words=tax_words,
        )

        logger.debug(
            "invoice_laid_out",
            bill_number=bill.bill_number,
            items=len(bill.items),
            ops=len(doc.ops),
        )
        return doc

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _title(self, page: _Page, y: float) -> float:
        page.font("B", 16)
        page.text(PAGE_WIDTH / 2, y, self._pdf.title, TextAlign.CENTER)
        return y + 10

    def _issuer_box(self, page: _Page, y: float, bill: Bill, issuer: Issuer) -> float:
        page.rect(MARGIN, y, CONTENT_WIDTH, 25)

        page.font("B", 10)
        page.text(MARGIN + 2, y + 5, safe_text(issuer.business_name).upper())

        page.font("", 8)
        line_y = y + 8
        for line in _issuer_address_lines(issuer):
            if line.strip():
                page.text(MARGIN + 2, line_y, line)
                line_y += 3

        values = {
            0: safe_text(bill.bill_number),
            1: format_date(bill.created_at),
            3: safe_text(bill.payment_mode) or "Cash",
        }
        detail_y = y + 3
        for idx, label in enumerate(INVOICE_DETAIL_LABELS):
            page.text(RIGHT_COLUMN_X, detail_y, f"{label}:")
            page.text(RIGHT_COLUMN_X + RIGHT_VALUE_OFFSET, detail_y, values.get(idx, ""))
            detail_y += 2.5

        return y + 28

    def _party_block(self, page: _Page, y: float, bill: Bill) -> float:
        # Fixed height; long content overflows rather than wraps
        page.rect(MARGIN, y, CONTENT_WIDTH, 20)
        customer = bill.customer

        page.font("", 8)
        page.text(MARGIN + 2, y + 4, "Consignee (Ship to)")
        page.text(RIGHT_COLUMN_X, y + 4, "Buyer (Bill to)")

        page.font("B")
        page.text(MARGIN + 2, y + 8, safe_text(getattr(customer, "name", None)).upper())

        page.font("")
        email = safe_text(getattr(customer, "email", None))
        gstin = safe_text(getattr(customer, "gstin", None))
        lines = [
            safe_text(getattr(customer, "address", None)) or "Address not provided",
            f"Phone: {safe_text(getattr(customer, 'phone', None))}",
            f"Email: {email}" if email else "",
            f"GSTIN/UIN: {gstin}" if gstin else "",
        ]
        line_y = y + 11
        for line in lines:
            if line.strip():
                page.text(MARGIN + 2, line_y, line)
                line_y += 3

        page.text(RIGHT_COLUMN_X, y + 8, "Dispatched through")
        page.text(RIGHT_COLUMN_X, y + 11, "Destination")
        page.text(RIGHT_COLUMN_X, y + 14, "Terms of Delivery")

        return y + 23

    def _item_table(self, page: _Page, y: float, bill: Bill) -> tuple[float, float, float]:
        page.rect(MARGIN, y, CONTENT_WIDTH, ITEM_HEADER_HEIGHT, HEADER_FILL_GRAY)
        page.rect(MARGIN, y, CONTENT_WIDTH, ITEM_HEADER_HEIGHT)
        page.font("B", 8)
        x = MARGIN
        for header, width in zip(ITEM_HEADERS, ITEM_COLUMN_WIDTHS):
            page.text(x + 2, y + 5, header)
            x += width
        page.column_dividers(ITEM_COLUMN_WIDTHS, y, ITEM_HEADER_HEIGHT)
        y += ITEM_HEADER_HEIGHT

        page.font("", 8)
        amount_total = 0.0
        discount_total = 0.0
        for index, item in enumerate(bill.items, 1):
            product = item.product
            quantity = safe_number(item.quantity)
            unit_price = safe_number(item.unit_price)
            amount = _line_amount(item, quantity, unit_price)

            cells = [
                str(index),
                truncate(safe_text(getattr(product, "name", None)), NAME_MAX_LENGTH),
                safe_text(getattr(product, "code", None)),
                format_quantity(quantity),
                format_amount(unit_price),
                format_amount(amount),
            ]
            page.rect(MARGIN, y, CONTENT_WIDTH, ITEM_ROW_HEIGHT)
            x = MARGIN
            for cell, width in zip(cells, ITEM_COLUMN_WIDTHS):
                page.text(x + 2, y + 7, cell)
                x += width
            page.column_dividers(ITEM_COLUMN_WIDTHS, y, ITEM_ROW_HEIGHT)

            amount_total += amount
            discount_total += safe_number(item.discount_amount)
            y += ITEM_ROW_HEIGHT

        for _ in range(len(bill.items), MIN_ITEM_ROWS):
            page.rect(MARGIN, y, CONTENT_WIDTH, ITEM_ROW_HEIGHT)
            page.column_dividers(ITEM_COLUMN_WIDTHS, y, ITEM_ROW_HEIGHT)
            y += ITEM_ROW_HEIGHT

        return y, amount_total, discount_total

    def _discount_row(
        self,
        page: _Page,
        y: float,
        bill: Bill,
        item_discount: float,
        bill_discount: float,
    ) -> float:
        if item_discount <= 0 and bill_discount <= 0:
            return y

        page.rect(MARGIN, y, CONTENT_WIDTH, DISCOUNT_ROW_HEIGHT)
        page.font("I")
        page.text(MARGIN + ITEM_COLUMN_WIDTHS[0] + 2, y + 5, "Less: Discount")

        value = safe_number(bill.bill_discount_value)
        if bill.bill_discount_type == DiscountType.PERCENTAGE and value > 0:
            page.text(PAGE_WIDTH - MARGIN - 50, y + 5, f"({value:g}%)")

        page.text(
            PAGE_WIDTH - MARGIN - 25,
            y + 5,
            f"({format_amount(item_discount + bill_discount)})",
            TextAlign.RIGHT,
        )
        return y + DISCOUNT_ROW_HEIGHT

    def _total_row(self, page: _Page, y: float, total: float) -> float:
        page.rect(MARGIN, y, CONTENT_WIDTH, TOTAL_ROW_HEIGHT, HEADER_FILL_GRAY)
        page.rect(MARGIN, y, CONTENT_WIDTH, TOTAL_ROW_HEIGHT)

        page.font("B", 10)
        page.text(PAGE_WIDTH - MARGIN - 80, y + 6, "Total")
        page.text(
            PAGE_WIDTH - MARGIN - 5,
            y + 6,
            format_currency(total, self.currency_symbol),
            TextAlign.RIGHT,
        )
        return y + TOTAL_ROW_HEIGHT + 5

    def _amount_words(self, page: _Page, y: float, total: float) -> tuple[float, str]:
        page.font("", 8)
        page.text(MARGIN, y, "Amount Chargeable (in words):")
        page.text(PAGE_WIDTH - MARGIN - 20, y, "E. & O.E")
        y += 4

        words = amount_in_words(total, self._billing.currency_code)
        page.font("B")
        page.text(MARGIN, y, words)
        return y + 8, words

    def _tax_table(self, page: _Page, y: float, taxable: float, tax: float, rate: float) -> float:
        page.rect(MARGIN, y, TAX_TABLE_WIDTH, TAX_HEADER_HEIGHT, HEADER_FILL_GRAY)
        page.rect(MARGIN, y, TAX_TABLE_WIDTH, TAX_HEADER_HEIGHT)
        page.font("B", 8)
        x = MARGIN
        for header, width in zip(TAX_HEADERS, TAX_COLUMN_WIDTHS):
            page.text(x + 1, y + 5, header)
            x += width
        page.column_dividers(TAX_COLUMN_WIDTHS, y, TAX_HEADER_HEIGHT)

        row_y = y + TAX_HEADER_HEIGHT
        page.rect(MARGIN, row_y, TAX_TABLE_WIDTH, TAX_ROW_HEIGHT)
        page.font("")
        cells = ["", format_amount(taxable), f"{rate:g}% {format_amount(tax)}", format_amount(tax)]
        x = MARGIN
        for cell, width in zip(cells, TAX_COLUMN_WIDTHS):
            page.text(x + 1, row_y + 4, cell)
            x += width
        page.column_dividers(TAX_COLUMN_WIDTHS, row_y, TAX_ROW_HEIGHT)

        total_y = row_y + TAX_ROW_HEIGHT
        page.rect(MARGIN, total_y, TAX_TABLE_WIDTH, TAX_ROW_HEIGHT, HEADER_FILL_GRAY)
        page.rect(MARGIN, total_y, TAX_TABLE_WIDTH, TAX_ROW_HEIGHT)
        page.font("B")
        w = TAX_COLUMN_WIDTHS
        page.text(MARGIN + 1, total_y + 4, "Total")
        page.text(MARGIN + w[0] + w[1] - 20, total_y + 4, format_amount(taxable), TextAlign.RIGHT)
        page.text(MARGIN + w[0] + w[1] + w[2] - 20, total_y + 4, format_amount(tax), TextAlign.RIGHT)
        page.text(MARGIN + TAX_TABLE_WIDTH - 5, total_y + 4, format_amount(tax), TextAlign.RIGHT)

        return total_y + TAX_ROW_HEIGHT + 10

    def _tax_words(self, page: _Page, y: float, tax: float) -> tuple[float, str]:
        page.font("", 8)
        page.text(MARGIN, y, "Tax Amount (in words):")
        y += 4

        words = amount_in_words(tax, self._billing.currency_code)
        page.font("B")
        page.text(MARGIN, y, words)
        return y + 10, words

    def _bank_details(self, page: _Page, y: float, issuer: Issuer) -> float:
        page.font("", 8)
        page.text(MARGIN, y, "Company's Bank Details")
        y += 4

        lines = [
            f"A/c Holder's Name: {safe_text(issuer.business_name)}",
            f"Bank Name: {safe_text(issuer.bank_name) or 'Bank Name'}",
            f"A/c No.: {safe_text(issuer.account_number) or 'Account Number'}",
            f"Branch & IFS Code: {safe_text(issuer.swift_code) or 'IFSC Code'}",
        ]
        for line in lines:
            page.text(MARGIN, y, line)
            y += 3
        return y

    def _signature(self, page: _Page, y: float, issuer: Issuer) -> None:
        x = PAGE_WIDTH - MARGIN - 60
        page.text(x, y - 10, f"for {safe_text(issuer.business_name).upper()}")
        page.text(x, y + 10, "Authorised Signatory")

    def _footer(self, page: _Page) -> None:
        page.font("I", 8)
        page.text(PAGE_WIDTH / 2, FOOTER_Y, self._pdf.footer_text, TextAlign.CENTER)


def _issuer_address_lines(issuer: Issuer) -> list[str]:
    city = safe_text(issuer.city)
    state = safe_text(issuer.state)
    zip_code = safe_text(issuer.zip_code)

    locality = ", ".join(part for part in (city, state) if part)
    if zip_code:
        locality = f"{locality} - {zip_code}" if locality else zip_code

    return [
        safe_text(issuer.address),
        locality,
        f"GSTIN/UIN: {safe_text(issuer.tax_id) or 'N/A'}",
        f"State Name: {state}, Code: {safe_text(issuer.state_code)}" if state else "",
        f"Contact: {safe_text(issuer.phone)}" if safe_text(issuer.phone) else "",
        f"E-Mail: {safe_text(issuer.email)}" if safe_text(issuer.email) else "",
    ]


def _line_amount(item: Any, quantity: float, unit_price: float) -> float:
    total = getattr(item, "total", None)
    if total is None:
        return quantity * unit_price
    return safe_number(total)
