"""Tests for the draft bill state machine."""

import asyncio
import re
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.core.entities.bill import Bill
from src.core.entities.discount import DiscountType
from src.core.exceptions import (
    DraftInProgressError,
    FinalizeInProgressError,
    ItemIndexError,
    NoDraftError,
    PersistenceError,
    ValidationError,
)
from src.core.interfaces.data_service import DataServiceResult
from src.core.services.bill_builder import BillBuilder, build_bill_item, generate_bill_number


def _saving_service() -> AsyncMock:
    """Data service mock that echoes the bill back with a server id."""
    service = AsyncMock()

    async def create_bill(bill: Bill) -> DataServiceResult[Bill]:
        return DataServiceResult.ok(bill.model_copy(update={"id": "srv-1"}))

    service.create_bill.side_effect = create_bill
    return service


@pytest.fixture
def builder() -> BillBuilder:
    return BillBuilder(_saving_service(), number_generator=lambda: "INV-TEST-0001")


class TestGenerateBillNumber:
    def test_format(self):
        number = generate_bill_number("INV", datetime(2024, 1, 15))
        assert re.fullmatch(r"INV-20240115-[0-9A-F]{6}", number)

    def test_uses_configured_prefix(self, monkeypatch):
        monkeypatch.setenv("BILLING_BILL_NUMBER_PREFIX", "SHR")
        assert generate_bill_number().startswith("SHR-")

    def test_numbers_differ(self):
        assert generate_bill_number("INV") != generate_bill_number("INV")


class TestBuildBillItem:
    def test_captures_current_price(self, product):
        item = build_bill_item(product, 3, DiscountType.FIXED, 50)
        assert item.unit_price == 100.0
        assert item.product.id == "prod-1"
        assert item.total == 250.0

    def test_explicit_price(self, product):
        assert build_bill_item(product, 1, unit_price=80).unit_price == 80.0

    def test_string_discount_type(self, product):
        item = build_bill_item(product, 2, "percentage", 10)
        assert item.discount_type is DiscountType.PERCENTAGE
        assert item.discount_amount == pytest.approx(20.0)

    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"quantity": 0}, "quantity"),
            ({"quantity": 1.5}, "quantity"),
            ({"quantity": 1, "unit_price": 0}, "unit_price"),
            ({"quantity": 1, "discount_type": "percentage", "discount_value": 120}, "discount_value"),
            ({"quantity": 1, "discount_value": -5}, "discount_value"),
            ({"quantity": 1, "discount_type": "bogus"}, "discount_type"),
        ],
    )
    def test_rejects_invalid_input(self, product, kwargs, field):
        with pytest.raises(ValidationError) as exc:
            build_bill_item(product, **kwargs)
        assert exc.value.details["field"] == field


class TestDraftLifecycle:
    def test_starts_without_draft(self, builder):
        assert builder.draft is None
        assert not builder.has_draft

    def test_init_new_bill(self, builder, customer):
        draft = builder.init_new_bill(customer)
        assert draft.bill_number == "INV-TEST-0001"
        assert draft.id
        assert draft.items == []
        assert draft.customer.name == "Asha Verma"
        assert builder.draft is draft

    def test_each_draft_gets_new_identity(self, customer):
        builder = BillBuilder(_saving_service())
        first = builder.init_new_bill(customer)
        second = builder.init_new_bill(customer)
        assert first.id != second.id
        assert first.bill_number != second.bill_number

    def test_init_refuses_to_replace_draft_with_items(self, builder, customer, product):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))
        with pytest.raises(DraftInProgressError):
            builder.init_new_bill(customer)
        assert len(builder.draft.items) == 1

    def test_discard_empty_draft(self, builder, customer):
        builder.init_new_bill(customer)
        assert builder.discard_draft() is True
        assert builder.draft is None

    def test_discard_without_draft(self, builder):
        assert builder.discard_draft() is False

    def test_discard_draft_with_items_needs_force(self, builder, customer, product):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))
        with pytest.raises(DraftInProgressError):
            builder.discard_draft()
        assert builder.discard_draft(force=True) is True
        assert builder.draft is None


class TestMutations:
    @pytest.mark.parametrize("operation", ["add", "update", "remove", "discount"])
    def test_requires_draft(self, builder, product, operation):
        item = build_bill_item(product, 1)
        calls = {
            "add": lambda: builder.add_item(item),
            "update": lambda: builder.update_item(0, item),
            "remove": lambda: builder.remove_item(0),
            "discount": lambda: builder.set_bill_discount(DiscountType.FIXED, 5),
        }
        with pytest.raises(NoDraftError):
            calls[operation]()

    def test_add_item_recomputes_totals(self, builder, customer, product):
        builder.init_new_bill(customer)
        draft = builder.add_item(build_bill_item(product, 3, DiscountType.FIXED, 50))
        assert draft.subtotal == 300.0
        assert draft.total_discount == 50.0
        assert draft.total == 250.0

    def test_bill_discount_applies_to_remaining_balance(self, builder, customer, product):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 3, DiscountType.FIXED, 50))
        draft = builder.set_bill_discount(DiscountType.PERCENTAGE, 10)
        assert draft.bill_discount_amount == pytest.approx(25.0)
        assert draft.total_discount == pytest.approx(75.0)
        assert draft.total == pytest.approx(225.0)

    def test_set_bill_discount_leaves_items_alone(self, builder, customer, product):
        builder.init_new_bill(customer)
        before = builder.add_item(build_bill_item(product, 2)).items
        after = builder.set_bill_discount("fixed", 10).items
        assert after == before

    def test_set_bill_discount_validates(self, builder, customer):
        builder.init_new_bill(customer)
        with pytest.raises(ValidationError) as exc:
            builder.set_bill_discount(DiscountType.PERCENTAGE, 101)
        assert exc.value.details["field"] == "bill_discount_value"
        assert builder.draft.bill_discount_value == 0.0

    def test_update_item(self, builder, customer, product):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))
        draft = builder.update_item(0, build_bill_item(product, 4))
        assert draft.items[0].quantity == 4
        assert draft.total == 400.0

    def test_remove_item(self, builder, customer, product, products):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))
        builder.add_item(build_bill_item(products[0], 2))
        draft = builder.remove_item(0)
        assert [i.product.id for i in draft.items] == ["p-c"]
        assert draft.total == 90.0

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_index_out_of_range(self, builder, customer, product, index):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))
        with pytest.raises(ItemIndexError):
            builder.update_item(index, build_bill_item(product, 2))
        with pytest.raises(ItemIndexError):
            builder.remove_item(index)
        assert len(builder.draft.items) == 1

    def test_mutations_replace_the_draft(self, builder, customer, product):
        first = builder.init_new_bill(customer)
        second = builder.add_item(build_bill_item(product, 1))
        assert first.items == []
        assert second is not first

    def test_totals_match_fresh_recompute_after_any_sequence(self, builder, customer, product, products):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 2, "percentage", 15))
        builder.add_item(build_bill_item(products[1], 7, "fixed", 12))
        builder.set_bill_discount("fixed", 40)
        builder.update_item(1, build_bill_item(products[2], 3))
        builder.remove_item(0)
        draft = builder.set_bill_discount("percentage", 5)

        assert draft.subtotal == pytest.approx(90.0)
        assert draft.bill_discount_amount == pytest.approx(4.5)
        assert draft.total == pytest.approx(85.5)

    def test_catalog_change_does_not_touch_draft(self, builder, customer, product):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))
        product.unit_price = 999.0
        assert builder.draft.items[0].unit_price == 100.0
        assert builder.draft.items[0].product.unit_price == 100.0


class TestFinalize:
    async def test_no_draft(self, builder):
        with pytest.raises(NoDraftError):
            await builder.finalize()

    async def test_rejects_empty_draft(self, builder, customer):
        draft = builder.init_new_bill(customer)
        with pytest.raises(ValidationError):
            await builder.finalize()
        assert builder.draft is draft

    async def test_rejects_zero_quantity_item(self, builder, customer, product, make_item):
        builder.init_new_bill(customer)
        builder.add_item(make_item(product, quantity=0))
        with pytest.raises(ValidationError) as exc:
            await builder.finalize()
        assert exc.value.details["field"] == "items[0].quantity"
        assert builder.has_draft

    async def test_rejects_item_without_product_reference(self, builder, customer, make_item):
        from src.core.entities.product import Product

        builder.init_new_bill(customer)
        builder.add_item(make_item(Product(name="Loose item", unit_price=5.0), quantity=1))
        with pytest.raises(ValidationError):
            await builder.finalize()

    async def test_success(self, builder, customer, product):
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 3, DiscountType.FIXED, 50))
        saved = await builder.finalize(note="Paid at counter")

        assert saved.id == "srv-1"
        assert saved.note == "Paid at counter"
        assert saved.total == 250.0
        assert builder.draft is None
        assert builder.history == (saved,)

    async def test_persistence_failure_keeps_draft(self, customer, product):
        service = AsyncMock()
        service.create_bill.return_value = DataServiceResult.fail("Quota exceeded")
        builder = BillBuilder(service)
        builder.init_new_bill(customer)
        draft = builder.add_item(build_bill_item(product, 1))

        with pytest.raises(PersistenceError) as exc:
            await builder.finalize()

        assert exc.value.message == "Quota exceeded"
        assert builder.draft is draft
        assert builder.history == ()

    async def test_unexpected_exception_is_wrapped(self, customer, product):
        service = AsyncMock()
        service.create_bill.side_effect = ConnectionError("backend unreachable")
        builder = BillBuilder(service)
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))

        with pytest.raises(PersistenceError, match="backend unreachable"):
            await builder.finalize()
        assert builder.has_draft

    async def test_retry_after_failure(self, customer, product):
        service = _saving_service()
        original = service.create_bill.side_effect
        service.create_bill.side_effect = [DataServiceResult.fail("try again")]
        builder = BillBuilder(service)
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))

        with pytest.raises(PersistenceError):
            await builder.finalize()

        service.create_bill.side_effect = original
        saved = await builder.finalize()
        assert saved.id == "srv-1"
        assert service.create_bill.await_count == 2

    async def test_concurrent_finalize_is_rejected(self, customer, product):
        release = asyncio.Event()
        service = AsyncMock()

        async def slow_create(bill: Bill) -> DataServiceResult[Bill]:
            await release.wait()
            return DataServiceResult.ok(bill)

        service.create_bill.side_effect = slow_create
        builder = BillBuilder(service)
        builder.init_new_bill(customer)
        builder.add_item(build_bill_item(product, 1))

        first = asyncio.create_task(builder.finalize())
        await asyncio.sleep(0)
        assert builder.finalizing

        with pytest.raises(FinalizeInProgressError):
            await builder.finalize()
        with pytest.raises(FinalizeInProgressError):
            builder.add_item(build_bill_item(product, 2))

        release.set()
        saved = await first
        assert service.create_bill.await_count == 1
        assert len(saved.items) == 1
        assert not builder.finalizing
