"""In-memory implementation of the billing data service.

Used for local runs and tests. Entities are copied on the way in and out
so callers never share state with the store.
"""

from datetime import datetime
from typing import TypeVar
from uuid import uuid4

from pydantic import BaseModel

from src.config import get_logger
from src.core.entities.bill import Bill
from src.core.entities.customer import Customer
from src.core.entities.product import Product
from src.core.interfaces.data_service import DataServiceResult, IDataService

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class InMemoryDataService(IDataService):
    """Dictionary-backed data service."""

    def __init__(self) -> None:
        self._customers: dict[str, Customer] = {}
        self._products: dict[str, Product] = {}
        self._bills: dict[str, Bill] = {}

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    async def create_customer(self, customer: Customer) -> DataServiceResult[Customer]:
        stored = customer.model_copy(
            update={"id": customer.id or uuid4().hex, "created_at": datetime.utcnow()}
        )
        if stored.id in self._customers:
            return DataServiceResult.fail(f"Customer already exists: {stored.id}")
        self._customers[stored.id] = stored  # type: ignore[index]
        logger.info("customer_created", customer_id=stored.id)
        return DataServiceResult.ok(_copy(stored), "Customer added successfully")

    async def update_customer(self, customer: Customer) -> DataServiceResult[Customer]:
        existing = self._customers.get(customer.id or "")
        if existing is None:
            return DataServiceResult.fail(f"Customer not found: {customer.id}")
        stored = customer.model_copy(update={"created_at": existing.created_at})
        self._customers[existing.id] = stored  # type: ignore[index]
        return DataServiceResult.ok(_copy(stored), "Customer updated successfully")

    async def delete_customer(self, customer_id: str) -> DataServiceResult[None]:
        if self._customers.pop(customer_id, None) is None:
            return DataServiceResult.fail(f"Customer not found: {customer_id}")
        return DataServiceResult.ok(message="Customer deleted successfully")

    async def list_user_customers(self) -> list[Customer]:
        return [_copy(c) for c in self._customers.values()]

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def create_product(self, product: Product) -> DataServiceResult[Product]:
        stored = product.model_copy(update={"id": product.id or uuid4().hex, "sno": None})
        if stored.id in self._products:
            return DataServiceResult.fail(f"Product already exists: {stored.id}")
        self._products[stored.id] = stored  # type: ignore[index]
        logger.info("product_created", product_id=stored.id, code=stored.code)
        return DataServiceResult.ok(_copy(stored), "Product added successfully")

    async def update_product(self, product: Product) -> DataServiceResult[Product]:
        existing = self._products.get(product.id or "")
        if existing is None:
            return DataServiceResult.fail(f"Product not found: {product.id}")
        stored = product.model_copy(update={"created_at": existing.created_at, "sno": None})
        self._products[existing.id] = stored  # type: ignore[index]
        return DataServiceResult.ok(_copy(stored), "Product updated successfully")

    async def delete_product(self, product_id: str) -> DataServiceResult[None]:
        if self._products.pop(product_id, None) is None:
            return DataServiceResult.fail(f"Product not found: {product_id}")
        return DataServiceResult.ok(message="Product deleted successfully")

    async def list_user_products(self) -> list[Product]:
        return [_copy(p) for p in self._products.values()]

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    async def create_bill(self, bill: Bill) -> DataServiceResult[Bill]:
        if any(b.bill_number == bill.bill_number for b in self._bills.values()):
            return DataServiceResult.fail(f"Bill number already used: {bill.bill_number}")
        stored = bill.model_copy(update={"id": bill.id or uuid4().hex}, deep=True)
        if stored.id in self._bills:
            return DataServiceResult.fail(f"Bill already exists: {stored.id}")
        self._bills[stored.id] = stored  # type: ignore[index]
        logger.info("bill_created", bill_id=stored.id, bill_number=stored.bill_number)
        return DataServiceResult.ok(_copy(stored), "Bill saved successfully")

    async def update_bill(self, bill: Bill) -> DataServiceResult[Bill]:
        existing = self._bills.get(bill.id or "")
        if existing is None:
            return DataServiceResult.fail(f"Bill not found: {bill.id}")
        stored = bill.model_copy(
            update={"created_at": existing.created_at, "updated_at": datetime.utcnow()},
            deep=True,
        )
        self._bills[existing.id] = stored  # type: ignore[index]
        return DataServiceResult.ok(_copy(stored), "Bill updated successfully")

    async def delete_bill(self, bill_id: str) -> DataServiceResult[None]:
        if self._bills.pop(bill_id, None) is None:
            return DataServiceResult.fail(f"Bill not found: {bill_id}")
        return DataServiceResult.ok(message="Bill deleted successfully")

    async def list_user_bills(self) -> list[Bill]:
        return [_copy(b) for b in self._bills.values()]


def _copy(model: M) -> M:
    return model.model_copy(deep=True)
