"""
Bill history queries.

Search, status filtering and summary figures for finalized bills.
Results are always newest first.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from src.core.entities.bill import Bill, PaymentStatus


@dataclass(frozen=True)
class BillStats:
    """Summary figures over a set of bills."""

    bill_count: int
    total_revenue: float
    average_bill: float
    items_sold: int


def _matches(bill: Bill, needle: str, raw: str) -> bool:
    return (
        needle in bill.bill_number.lower()
        or needle in bill.customer.name.lower()
        or raw in bill.customer.phone
    )


def search_bills(
    bills: Iterable[Bill],
    query: str | None = None,
    status: PaymentStatus | str | None = None,
) -> list[Bill]:
    """Filter bills by text and payment status, newest first.

    The text matches bill number or customer name (case-insensitive) or
    customer phone. A ``status`` of None or ``"all"`` disables the status
    filter.
    """
    raw = (query or "").strip()
    needle = raw.lower()
    wanted = None if status in (None, "", "all") else PaymentStatus(status)

    selected = [
        b for b in bills
        if (not raw or _matches(b, needle, raw))
        and (wanted is None or b.payment_status == wanted)
    ]
    return sorted(selected, key=lambda b: b.created_at, reverse=True)


def bill_stats(bills: Iterable[Bill]) -> BillStats:
    """Revenue, average bill value and units sold."""
    bills = list(bills)
    revenue = sum(b.total for b in bills)
    return BillStats(
        bill_count=len(bills),
        total_revenue=revenue,
        average_bill=revenue / len(bills) if bills else 0.0,
        items_sold=sum(b.item_count for b in bills),
    )
