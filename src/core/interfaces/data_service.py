"""
Abstract interface for the billing data service.

The data service is an external collaborator (a backend API or local
store). Every call reports success or failure in its result instead of
raising, and fills in server-assigned fields on the returned entity.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.core.entities.bill import Bill
from src.core.entities.customer import Customer
from src.core.entities.product import Product

T = TypeVar("T")


@dataclass
class DataServiceResult(Generic[T]):
    """Outcome of a data service call."""

    success: bool
    entity: T | None = None
    message: str = ""

    @classmethod
    def ok(cls, entity: T | None = None, message: str = "") -> "DataServiceResult[T]":
        return cls(success=True, entity=entity, message=message)

    @classmethod
    def fail(cls, message: str) -> "DataServiceResult[T]":
        return cls(success=False, message=message)


class IDataService(ABC):
    """Interface for customer, product and bill persistence."""

    # Customers
    @abstractmethod
    async def create_customer(self, customer: Customer) -> DataServiceResult[Customer]:
        """Persist a new customer; id and created_at are assigned."""
        pass

    @abstractmethod
    async def update_customer(self, customer: Customer) -> DataServiceResult[Customer]:
        """Update a customer, keeping its original created_at."""
        pass

    @abstractmethod
    async def delete_customer(self, customer_id: str) -> DataServiceResult[None]:
        pass

    @abstractmethod
    async def list_user_customers(self) -> list[Customer]:
        pass

    # Products
    @abstractmethod
    async def create_product(self, product: Product) -> DataServiceResult[Product]:
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> DataServiceResult[Product]:
        pass

    @abstractmethod
    async def delete_product(self, product_id: str) -> DataServiceResult[None]:
        pass

    @abstractmethod
    async def list_user_products(self) -> list[Product]:
        pass

    # Bills
    @abstractmethod
    async def create_bill(self, bill: Bill) -> DataServiceResult[Bill]:
        """Persist a finalized bill."""
        pass

    @abstractmethod
    async def update_bill(self, bill: Bill) -> DataServiceResult[Bill]:
        pass

    @abstractmethod
    async def delete_bill(self, bill_id: str) -> DataServiceResult[None]:
        pass

    @abstractmethod
    async def list_user_bills(self) -> list[Bill]:
        pass
