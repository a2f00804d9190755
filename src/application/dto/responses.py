"""Response DTOs for API endpoints.

Pydantic v2 models for API responses.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.bill import Bill, BillItem, PaymentStatus
from src.core.entities.customer import Customer, CustomerSnapshot
from src.core.entities.discount import DiscountType
from src.core.entities.product import Product, ProductSnapshot
from src.core.services.history import BillStats


class CustomerResponse(BaseModel):
    """Customer record."""

    id: str = Field(..., description="Customer ID")
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    gstin: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerResponse":
        return cls(**customer.model_dump())


class ProductResponse(BaseModel):
    """Catalog product with its display serial number."""

    id: str = Field(..., description="Product ID")
    sno: int | None = Field(default=None, description="Serial number by creation order")
    name: str
    code: str
    unit_price: float
    stock_quantity: float | None = None
    unit_of_measurement: str | None = None
    tax_rate: float | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(sno=product.sno, **product.model_dump())


class BillItemResponse(BaseModel):
    """A line on a bill."""

    product: ProductSnapshot
    quantity: int
    unit_price: float
    discount_type: DiscountType
    discount_value: float
    subtotal: float
    discount_amount: float
    total: float

    @classmethod
    def from_entity(cls, item: BillItem) -> "BillItemResponse":
        return cls(**item.model_dump())


class BillResponse(BaseModel):
    """Draft or finalized bill."""

    id: str | None = None
    bill_number: str
    customer: CustomerSnapshot
    items: list[BillItemResponse] = Field(default_factory=list)
    item_count: int = Field(..., description="Total units across all lines")
    bill_discount_type: DiscountType
    bill_discount_value: float
    subtotal: float
    bill_discount_amount: float
    total_discount: float
    total: float
    note: str | None = None
    payment_mode: str
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, bill: Bill) -> "BillResponse":
        data = bill.model_dump(exclude={"items"})
        return cls(
            items=[BillItemResponse.from_entity(i) for i in bill.items],
            item_count=bill.item_count,
            **data,
        )


class BillListResponse(BaseModel):
    """Bill history page."""

    bills: list[BillResponse]
    total: int


class BillStatsResponse(BaseModel):
    """Summary figures over bill history."""

    bill_count: int
    total_revenue: float
    average_bill: float
    items_sold: int

    @classmethod
    def from_stats(cls, stats: BillStats) -> "BillStatsResponse":
        return cls(
            bill_count=stats.bill_count,
            total_revenue=stats.total_revenue,
            average_bill=stats.average_bill,
            items_sold=stats.items_sold,
        )


class SessionResponse(BaseModel):
    """Billing session state."""

    session_id: str
    has_draft: bool
    finalized_count: int = Field(default=0, description="Bills finalized in this session")


class ExportResponse(BaseModel):
    """Outcome of an invoice export."""

    bill_number: str
    requested_mode: str
    mode: str = Field(..., description="Mode that actually succeeded")
    fell_back: bool
    file_name: str
    location: str
    file_size: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    customers: int = 0
    products: int = 0
    bills: int = 0
    sessions: int = 0


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. BILL_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
