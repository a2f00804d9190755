"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from src.application.services import reset_services
from src.config import reset_settings
from src.core.entities.bill import BillItem
from src.core.entities.customer import Customer
from src.core.entities.discount import DiscountType
from src.core.entities.issuer import Issuer
from src.core.entities.product import Product
from src.infrastructure.storage import InMemoryDataService


@pytest.fixture(autouse=True)
def _fresh_singletons() -> Generator[None, None, None]:
    """Settings and service singletons never leak between tests."""
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def customer() -> Customer:
    return Customer(
        id="cust-1",
        name="Asha Verma",
        phone="9876543210",
        email="asha@example.com",
        address="12 MG Road, Lucknow",
        gstin="09AAACH7409R1ZZ",
    )


@pytest.fixture
def product() -> Product:
    return Product(id="prod-1", name="Steel Bolt M8", code="SB-08", unit_price=100.0)


@pytest.fixture
def products() -> list[Product]:
    base = datetime(2024, 1, 1, 9, 0, 0)
    return [
        Product(id="p-c", name="Copper Wire", code="CW-1", unit_price=45.0,
                created_at=base + timedelta(minutes=2)),
        Product(id="p-a", name="Anchor Bolt", code="AB-1", unit_price=12.5,
                created_at=base),
        Product(id="p-b", name="Brass Hinge", code="BH-1", unit_price=30.0,
                created_at=base + timedelta(minutes=1)),
    ]


@pytest.fixture
def issuer() -> Issuer:
    return Issuer(
        business_name="Shree Traders",
        address="45 Hazratganj",
        city="Lucknow",
        state="Uttar Pradesh",
        zip_code="226001",
        state_code="09",
        tax_id="09ABCDE1234F1Z5",
        phone="0522-2345678",
        email="accounts@shreetraders.in",
        bank_name="State Bank of India",
        account_number="30012345678",
        swift_code="SBIN0001234",
    )


@pytest.fixture
def make_item() -> Callable[..., BillItem]:
    """Factory for bill items that skips input validation."""

    def _make(
        product: Product,
        quantity: int = 1,
        unit_price: float | None = None,
        discount_type: DiscountType = DiscountType.FIXED,
        discount_value: float = 0.0,
    ) -> BillItem:
        return BillItem(
            product=product.snapshot(),
            quantity=quantity,
            unit_price=product.unit_price if unit_price is None else unit_price,
            discount_type=discount_type,
            discount_value=discount_value,
        )

    return _make


@pytest.fixture
def data_service() -> InMemoryDataService:
    return InMemoryDataService()


@pytest.fixture
async def api_client(data_service: InMemoryDataService) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the data service swapped for a fresh in-memory one."""
    from src.api.dependencies import get_data, get_sessions
    from src.api.main import app
    from src.application.sessions import BillingSessionRegistry

    sessions = BillingSessionRegistry(data_service)
    app.dependency_overrides[get_data] = lambda: data_service
    app.dependency_overrides[get_sessions] = lambda: sessions

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
