"""
Dependency injection container for FastAPI.

Provides service instances to route handlers.
"""

from functools import lru_cache

from src.application.services import (
    get_data_service,
    get_export_invoice_use_case,
    get_session_registry,
)
from src.application.sessions import BillingSessionRegistry
from src.application.use_cases import ExportInvoiceUseCase
from src.config import Settings, get_settings
from src.core.entities.bill import Bill
from src.core.entities.customer import Customer
from src.core.entities.product import Product
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces.data_service import IDataService


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


def get_data() -> IDataService:
    """Get the billing data service."""
    return get_data_service()


def get_sessions() -> BillingSessionRegistry:
    """Get the billing session registry."""
    return get_session_registry()


def get_export_use_case() -> ExportInvoiceUseCase:
    """Get the invoice export use case."""
    return get_export_invoice_use_case()


# Lookups shared by routes; the data service only lists, so find by id here


async def find_customer(data: IDataService, customer_id: str) -> Customer:
    for customer in await data.list_user_customers():
        if customer.id == customer_id:
            return customer
    raise EntityNotFoundError("customer", customer_id)


async def find_product(data: IDataService, product_id: str) -> Product:
    for product in await data.list_user_products():
        if product.id == product_id:
            return product
    raise EntityNotFoundError("product", product_id)


async def find_bill(data: IDataService, bill_id: str) -> Bill:
    for bill in await data.list_user_bills():
        if bill.id == bill_id:
            return bill
    raise EntityNotFoundError("bill", bill_id)
