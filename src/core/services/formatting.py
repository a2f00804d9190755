"""Money and text formatting helpers for invoices."""

import math
from datetime import datetime
from decimal import Decimal
from typing import Any


def safe_text(value: Any) -> str:
    """Coerce a missing or non-string value to a stripped string."""
    if value is None:
        return ""
    return str(value).strip()


def safe_number(value: Any) -> float:
    """Coerce a missing or non-numeric value to 0.0."""
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip().replace(",", ""))
        except (ValueError, TypeError):
            return 0.0
    return number if math.isfinite(number) else 0.0


def format_amount(amount: float) -> str:
    """Two decimal places, no grouping: ``1234.5 -> "1234.50"``."""
    return f"{amount:.2f}"


def group_indian(amount: float) -> str:
    """Two decimals with Indian digit grouping: ``1234567.8 -> "12,34,567.80"``."""
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        pairs.insert(0, head)
        whole = ",".join(pairs + [tail])
    return f"{sign}{whole}.{fraction}"


def format_currency(amount: float, symbol: str = "₹") -> str:
    """Grand total format: currency glyph plus Indian grouping."""
    return f"{symbol}{group_indian(amount)}"


def format_quantity(quantity: float) -> str:
    """``3.0 -> "3"``, ``2.5 -> "2.5"``."""
    return f"{quantity:g}"


def format_date(value: datetime | None) -> str:
    """Day/month/year as printed on invoices."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def truncate(text: str, limit: int, marker: str = "...") -> str:
    """Cut *text* to *limit* characters and append *marker* when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker
