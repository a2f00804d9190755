"""
Fixed-layout invoice document model.

A renderer-independent list of drawing operations in millimetres, with
the origin at the top-left corner of the page. Text ``y`` is the
baseline.
"""

from dataclasses import dataclass, field
from enum import Enum


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class TextOp:
    """Draw a single line of text anchored at (x, y)."""

    x: float
    y: float
    text: str
    size: float = 8
    style: str = ""  # "", "B" or "I"
    align: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class RectOp:
    """Draw a rectangle outline, or fill it with a grey level."""

    x: float
    y: float
    w: float
    h: float
    fill_gray: int | None = None

    @property
    def filled(self) -> bool:
        return self.fill_gray is not None


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float


DrawOp = TextOp | RectOp | LineOp


@dataclass(frozen=True)
class InvoiceFigures:
    """Amounts computed while laying out the invoice."""

    item_amount_total: float
    item_discount_total: float
    bill_discount_amount: float
    discount_total: float
    total: float
    tax_rate: float
    taxable_value: float
    tax_amount: float
    amount_in_words: str
    tax_in_words: str


@dataclass
class InvoiceDocument:
    """Laid-out invoice: page geometry, drawing operations and figures."""

    page_width: float
    page_height: float
    ops: list[DrawOp] = field(default_factory=list)
    figures: InvoiceFigures | None = None

    def texts(self) -> list[str]:
        """All text strings in drawing order."""
        return [op.text for op in self.ops if isinstance(op, TextOp)]

    def find_text(self, text: str) -> TextOp | None:
        """First text operation whose content equals *text*."""
        for op in self.ops:
            if isinstance(op, TextOp) and op.text == text:
                return op
        return None
