"""Tests for catalog search and bill history queries."""

from datetime import datetime, timedelta

import pytest

from src.core.entities.bill import Bill, PaymentStatus
from src.core.entities.customer import Customer
from src.core.services.catalog import search_customers, search_products
from src.core.services.history import BillStats, bill_stats, search_bills


class TestSearchProducts:
    def test_numbers_by_creation_time(self, products):
        result = search_products(products)
        assert [(p.sno, p.id) for p in result] == [(1, "p-a"), (2, "p-b"), (3, "p-c")]

    def test_filter_keeps_catalog_numbering(self, products):
        result = search_products(products, "hinge")
        assert [(p.sno, p.name) for p in result] == [(2, "Brass Hinge")]

    def test_matches_code(self, products):
        assert [p.id for p in search_products(products, "cw-")] == ["p-c"]

    def test_blank_query_returns_all(self, products):
        assert len(search_products(products, "   ")) == 3

    def test_inputs_are_not_modified(self, products):
        search_products(products)
        assert all(p.sno is None for p in products)


class TestSearchCustomers:
    @pytest.fixture
    def customers(self) -> list[Customer]:
        return [
            Customer(id="c1", name="Asha Verma", phone="9876543210"),
            Customer(id="c2", name="Ravi Kumar", phone="9123456780"),
        ]

    def test_name_is_case_insensitive(self, customers):
        assert [c.id for c in search_customers(customers, "RAVI")] == ["c2"]

    def test_phone_substring(self, customers):
        assert [c.id for c in search_customers(customers, "98765")] == ["c1"]

    def test_no_query(self, customers):
        assert len(search_customers(customers)) == 2


@pytest.fixture
def bills(customer, product, make_item) -> list[Bill]:
    base = datetime(2024, 1, 1, 12, 0)
    other = Customer(id="cust-2", name="Ravi Kumar", phone="9123456780").snapshot()
    return [
        Bill(bill_number="INV-20240101-AAAAAA", customer=customer.snapshot(),
             items=[make_item(product, quantity=2)], total=200.0,
             payment_status=PaymentStatus.PAID, created_at=base),
        Bill(bill_number="INV-20240102-BBBBBB", customer=other,
             items=[make_item(product, quantity=1)], total=100.0,
             created_at=base + timedelta(days=1)),
        Bill(bill_number="INV-20240103-CCCCCC", customer=customer.snapshot(),
             items=[make_item(product, quantity=3)], total=300.0,
             payment_status=PaymentStatus.OVERDUE, created_at=base + timedelta(days=2)),
    ]


class TestSearchBills:
    def test_newest_first(self, bills):
        numbers = [b.bill_number for b in search_bills(bills)]
        assert numbers == ["INV-20240103-CCCCCC", "INV-20240102-BBBBBB", "INV-20240101-AAAAAA"]

    def test_by_bill_number(self, bills):
        assert [b.bill_number for b in search_bills(bills, "bbbbbb")] == ["INV-20240102-BBBBBB"]

    def test_by_customer_name(self, bills):
        assert len(search_bills(bills, "asha")) == 2

    def test_by_phone(self, bills):
        assert [b.customer.id for b in search_bills(bills, "912345")] == ["cust-2"]

    @pytest.mark.parametrize("status", [None, "", "all"])
    def test_status_all(self, bills, status):
        assert len(search_bills(bills, status=status)) == 3

    def test_status_filter(self, bills):
        assert [b.bill_number for b in search_bills(bills, status="paid")] == ["INV-20240101-AAAAAA"]

    def test_text_and_status(self, bills):
        assert [b.bill_number for b in search_bills(bills, "asha", PaymentStatus.OVERDUE)] == [
            "INV-20240103-CCCCCC"
        ]

    def test_unknown_status(self, bills):
        with pytest.raises(ValueError):
            search_bills(bills, status="refunded")


class TestBillStats:
    def test_figures(self, bills):
        assert bill_stats(bills) == BillStats(
            bill_count=3, total_revenue=600.0, average_bill=200.0, items_sold=6
        )

    def test_empty(self):
        assert bill_stats([]) == BillStats(0, 0, 0.0, 0)
