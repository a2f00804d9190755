"""Bill and bill item entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from src.core.entities.customer import CustomerSnapshot
from src.core.entities.discount import DiscountType
from src.core.entities.product import ProductSnapshot
from src.core.services.calculator import item_discount, item_subtotal, item_total


class PaymentStatus(str, Enum):
    """Payment state shown in bill history."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class BillItem(BaseModel):
    """A line on a bill.

    Carries its own product snapshot and the unit price captured when the
    line was added. ``subtotal``, ``discount_amount`` and ``total`` are
    derived and recomputed on every validation.
    """

    product: ProductSnapshot
    quantity: int
    unit_price: float
    discount_type: DiscountType = DiscountType.FIXED
    discount_value: float = 0.0

    # Derived
    subtotal: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0

    @model_validator(mode="after")
    def compute_line(self) -> "BillItem":
        """Compute subtotal, discount_amount and total."""
        self.subtotal = item_subtotal(self.unit_price, self.quantity)
        self.discount_amount = item_discount(
            self.subtotal, self.discount_type, self.discount_value
        )
        self.total = item_total(self.subtotal, self.discount_amount)
        return self


class Bill(BaseModel):
    """A draft or finalized bill.

    Totals are set by ``BillBuilder`` from ``bill_totals`` after every
    mutation; they are stored with the bill once it is persisted.
    """

    id: str | None = None
    bill_number: str
    customer: CustomerSnapshot
    items: list[BillItem] = Field(default_factory=list)

    bill_discount_type: DiscountType = DiscountType.FIXED
    bill_discount_value: float = 0.0

    # Derived
    subtotal: float = 0.0
    bill_discount_amount: float = 0.0
    total_discount: float = 0.0
    total: float = 0.0

    note: str | None = None
    payment_mode: str = "Cash"
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(item.quantity for item in self.items)
