"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. Business-rule checks
(positive quantity, discount range, phone format) are done by the core
validators so they surface as ``ValidationError`` responses.
"""

from pydantic import AliasChoices, BaseModel, Field

from src.core.entities.discount import DiscountType

# --- Catalog ---


class CustomerRequest(BaseModel):
    """Create or update a customer."""

    name: str = Field(..., description="Customer name (2+ characters)", examples=["Asha Verma"])
    phone: str = Field(..., description="10-digit phone, optional +country code", examples=["9876543210"])
    email: str | None = Field(default=None, description="Email address")
    address: str | None = Field(default=None, description="Postal address")
    gstin: str | None = Field(default=None, description="Customer tax id")


class ProductRequest(BaseModel):
    """Create or update a product."""

    name: str = Field(..., description="Product name")
    code: str = Field(default="", description="Product code", examples=["HSN-8471"])
    unit_price: float = Field(
        ...,
        description="Current selling price",
        validation_alias=AliasChoices("unit_price", "price"),
    )
    stock_quantity: float | None = Field(default=None, description="Units in stock")
    unit_of_measurement: str | None = Field(default=None, description="Unit of measure", examples=["pcs", "kg"])
    tax_rate: float | None = Field(default=None, ge=0, le=100, description="Tax rate percentage")


# --- Billing ---


class OpenDraftRequest(BaseModel):
    """Start a new draft bill for a customer."""

    customer_id: str = Field(..., description="Customer to bill")


class BillItemRequest(BaseModel):
    """Add or replace a line on the draft bill."""

    product_id: str = Field(..., description="Catalog product ID")
    quantity: int = Field(..., description="Units, a positive integer")
    discount_type: DiscountType = Field(default=DiscountType.FIXED, description="fixed or percentage")
    discount_value: float = Field(default=0.0, description="Discount amount or percentage")
    unit_price: float | None = Field(
        default=None,
        description="Override the catalog price for this line",
    )


class BillDiscountRequest(BaseModel):
    """Set the bill-level discount."""

    discount_type: DiscountType = Field(default=DiscountType.FIXED, description="fixed or percentage")
    discount_value: float = Field(default=0.0, description="Discount amount or percentage")


class FinalizeBillRequest(BaseModel):
    """Finalize and save the draft bill."""

    note: str | None = Field(default=None, description="Note kept with the saved bill")
