"""Discount kinds shared by items and bills."""

from enum import Enum


class DiscountType(str, Enum):
    """How a discount value is interpreted."""

    FIXED = "fixed"
    PERCENTAGE = "percentage"
