"""Product catalog entities."""

from collections.abc import Iterable
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProductSnapshot(BaseModel):
    """Immutable copy of a product as it was when added to a bill.

    Later catalog edits never change a saved bill.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str = ""
    code: str = ""
    unit_price: float = 0.0
    unit_of_measurement: str | None = None
    tax_rate: float | None = None


class Product(BaseModel):
    """A catalog product."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str
    code: str = ""
    # Older records stored the price as "price"
    unit_price: float = Field(
        default=0.0,
        validation_alias=AliasChoices("unit_price", "unitPrice", "price"),
    )
    stock_quantity: float | None = None
    unit_of_measurement: str | None = None
    tax_rate: float | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Display order, derived from created_at; never persisted
    sno: int | None = Field(default=None, exclude=True)

    def snapshot(self) -> ProductSnapshot:
        """Return a frozen copy for embedding in a bill item."""
        return ProductSnapshot(
            id=self.id,
            name=self.name,
            code=self.code,
            unit_price=self.unit_price,
            unit_of_measurement=self.unit_of_measurement,
            tax_rate=self.tax_rate,
        )


def assign_serial_numbers(products: Iterable[Product]) -> list[Product]:
    """Return copies of *products* ordered by creation time with sno 1..N.

    The sort is stable, so products created at the same instant keep
    their incoming order.
    """
    ordered = sorted(products, key=lambda p: p.created_at)
    return [p.model_copy(update={"sno": idx}) for idx, p in enumerate(ordered, 1)]
