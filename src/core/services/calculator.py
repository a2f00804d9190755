"""
Money and discount arithmetic for bill items and bills.

Pure functions with no side effects. Inputs are assumed validated by the
caller (positive quantity and unit price); values outside the discount
range are clamped rather than rejected.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from src.core.entities.discount import DiscountType

MAX_PERCENTAGE = 100.0


class PricedLine(Protocol):
    """Anything carrying a computed subtotal and discount amount."""

    subtotal: float
    discount_amount: float


@dataclass(frozen=True)
class BillTotals:
    """Derived bill amounts, always recomputed as a whole."""

    subtotal: float
    item_discounts: float
    bill_discount_amount: float
    total_discount: float
    total: float


def item_subtotal(unit_price: float, quantity: float) -> float:
    """Return ``unit_price * quantity``."""
    return unit_price * quantity


def _clamped_discount(base: float, discount_type: DiscountType | str, value: float) -> float:
    if value <= 0 or base <= 0:
        return 0.0
    if DiscountType(discount_type) is DiscountType.PERCENTAGE:
        return base * min(value, MAX_PERCENTAGE) / 100
    return min(value, base)


def item_discount(
    subtotal: float,
    discount_type: DiscountType | str,
    value: float,
) -> float:
    """Discount amount for one line.

    Fixed discounts are capped at the subtotal; percentages are capped at
    100%. The result never exceeds ``subtotal``.
    """
    return _clamped_discount(subtotal, discount_type, value)


def item_total(subtotal: float, discount_amount: float) -> float:
    """Return ``subtotal - discount_amount``."""
    return subtotal - discount_amount


def bill_discount(
    subtotal: float,
    item_discounts: float,
    discount_type: DiscountType | str,
    value: float,
) -> float:
    """Bill-level discount on the balance left after item discounts."""
    base = max(0.0, subtotal - item_discounts)
    return _clamped_discount(base, discount_type, value)


def bill_totals(
    items: Iterable[PricedLine],
    bill_discount_type: DiscountType | str = DiscountType.FIXED,
    bill_discount_value: float = 0.0,
) -> BillTotals:
    """Compute all bill totals from scratch.

    Item discounts are applied first; the bill discount is applied to the
    remaining balance, so the two can never stack beyond the subtotal.
    """
    lines = list(items)
    subtotal = sum(line.subtotal for line in lines)
    item_discounts = sum(line.discount_amount for line in lines)
    bill_discount_amount = bill_discount(
        subtotal, item_discounts, bill_discount_type, bill_discount_value
    )
    total_discount = item_discounts + bill_discount_amount

    return BillTotals(
        subtotal=subtotal,
        item_discounts=item_discounts,
        bill_discount_amount=bill_discount_amount,
        total_discount=total_discount,
        total=max(0.0, subtotal - total_discount),
    )


def tax_inclusive_split(total: float, rate: float) -> tuple[float, float]:
    """Split a tax-inclusive *total* into ``(taxable_value, tax)``.

    ``tax = total * rate / (100 + rate)``; a non-positive total or rate
    yields no tax.
    """
    if total <= 0 or rate <= 0:
        return max(0.0, total), 0.0
    tax = total * rate / (100 + rate)
    return total - tax, tax
