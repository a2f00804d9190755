"""
Input validators.

Run at the edges (builder factory, API requests) so the calculator only
ever sees well-formed values. Each ``check_*`` raises ``ValidationError``;
each ``is_valid_*`` returns a bool.
"""

import re
from typing import Any

from src.core.entities.discount import DiscountType
from src.core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^(\+\d{1,3})?\d{10}$")
_PHONE_SEPARATORS_RE = re.compile(r"[\s\-().]")


def is_valid_quantity(quantity: Any) -> bool:
    """Quantity must be a positive whole number."""
    if isinstance(quantity, bool):
        return False
    if isinstance(quantity, float) and quantity.is_integer():
        quantity = int(quantity)
    return isinstance(quantity, int) and quantity > 0


def is_valid_unit_price(unit_price: Any) -> bool:
    if isinstance(unit_price, bool) or not isinstance(unit_price, (int, float)):
        return False
    return unit_price > 0


def is_valid_discount(value: Any, discount_type: DiscountType | str) -> bool:
    """Non-negative; percentages may not exceed 100."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if value < 0:
        return False
    if DiscountType(discount_type) is DiscountType.PERCENTAGE:
        return value <= 100
    return True


def is_valid_customer_name(name: str | None) -> bool:
    return bool(name) and len(name.strip()) >= 2


def is_valid_phone(phone: str | None) -> bool:
    """Ten digits with an optional ``+<country>`` prefix; separators ignored."""
    if not phone:
        return False
    return bool(_PHONE_RE.match(_PHONE_SEPARATORS_RE.sub("", phone)))


def is_valid_email(email: str | None) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


def check_quantity(quantity: Any) -> int:
    if not is_valid_quantity(quantity):
        raise ValidationError("quantity", "Quantity must be a positive integer", quantity)
    return int(quantity)


def check_unit_price(unit_price: Any) -> float:
    if not is_valid_unit_price(unit_price):
        raise ValidationError("unit_price", "Unit price must be greater than 0", unit_price)
    return float(unit_price)


def check_discount(
    value: Any,
    discount_type: DiscountType | str,
    field: str = "discount_value",
) -> float:
    try:
        kind = DiscountType(discount_type)
    except ValueError:
        raise ValidationError(
            "discount_type", "Discount type must be 'fixed' or 'percentage'", discount_type
        ) from None
    if not is_valid_discount(value, kind):
        message = (
            "Percentage discount must be between 0 and 100"
            if kind is DiscountType.PERCENTAGE
            else "Discount must be a non-negative amount"
        )
        raise ValidationError(field, message, value)
    return float(value)


def check_customer_fields(name: str | None, phone: str | None, email: str | None = None) -> None:
    """Validate the required and optional customer contact fields."""
    if not is_valid_customer_name(name):
        raise ValidationError("name", "Name must be at least 2 characters", name)
    if not is_valid_phone(phone):
        raise ValidationError("phone", "Phone must contain 10 digits", phone)
    if email and not is_valid_email(email):
        raise ValidationError("email", "Email address is not valid", email)
