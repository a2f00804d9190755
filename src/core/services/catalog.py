"""Catalog search over products and customers."""

from collections.abc import Iterable

from src.core.entities.customer import Customer
from src.core.entities.product import Product, assign_serial_numbers


def search_products(products: Iterable[Product], query: str | None = None) -> list[Product]:
    """Products matching *query* on name or code, ordered by serial number.

    Serial numbers are assigned over the full catalog before filtering, so
    a product keeps its number in every result set.
    """
    numbered = assign_serial_numbers(products)
    needle = (query or "").strip().lower()
    if not needle:
        return numbered
    return [
        p for p in numbered
        if needle in p.name.lower() or needle in (p.code or "").lower()
    ]


def search_customers(customers: Iterable[Customer], query: str | None = None) -> list[Customer]:
    """Customers whose name (case-insensitive) or phone contains *query*."""
    raw = (query or "").strip()
    if not raw:
        return list(customers)
    needle = raw.lower()
    return [c for c in customers if needle in c.name.lower() or raw in c.phone]
