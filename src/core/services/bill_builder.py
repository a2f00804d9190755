"""
Draft bill state machine.

A ``BillBuilder`` owns at most one draft bill. Each mutation replaces the
item list and recomputes every total from scratch via ``bill_totals``.
``finalize`` persists the draft through the data service and moves it
into the builder's bill history.

States: no draft -> empty draft -> draft with items -> (finalize) no draft.
"""

import asyncio
import secrets
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from src.config import get_logger, get_settings
from src.core.entities.bill import Bill, BillItem
from src.core.entities.customer import Customer
from src.core.entities.discount import DiscountType
from src.core.entities.product import Product
from src.core.exceptions import (
    DraftInProgressError,
    FinalizeInProgressError,
    ItemIndexError,
    NoDraftError,
    PersistenceError,
    ValidationError,
)
from src.core.interfaces.data_service import IDataService
from src.core.services.calculator import bill_totals
from src.core.services.validation import check_discount, check_quantity, check_unit_price

logger = get_logger(__name__)


def generate_bill_number(prefix: str | None = None, now: datetime | None = None) -> str:
    """Bill number like ``INV-20260115-3F9A2C``."""
    if prefix is None:
        prefix = get_settings().billing.bill_number_prefix
    stamp = (now or datetime.utcnow()).strftime("%Y%m%d")
    return f"{prefix}-{stamp}-{secrets.token_hex(3).upper()}"


def build_bill_item(
    product: Product,
    quantity: int,
    discount_type: DiscountType | str = DiscountType.FIXED,
    discount_value: float = 0.0,
    unit_price: float | None = None,
) -> BillItem:
    """Validate inputs and create a bill item from a catalog product.

    The product is snapshotted and its current price captured unless an
    explicit ``unit_price`` is given.

    Raises:
        ValidationError: On a non-positive quantity or price, or a discount
            outside its allowed range.
    """
    price = product.unit_price if unit_price is None else unit_price
    quantity = check_quantity(quantity)
    price = check_unit_price(price)
    discount_value = check_discount(discount_value, discount_type)
    return BillItem(
        product=product.snapshot(),
        quantity=quantity,
        unit_price=price,
        discount_type=DiscountType(discount_type),
        discount_value=discount_value,
    )


def _check_item_structure(index: int, item: BillItem) -> None:
    if item.product is None or not item.product.id:
        raise ValidationError(f"items[{index}].product", "Item has no product reference")
    if item.quantity <= 0:
        raise ValidationError(f"items[{index}].quantity", "Quantity must be greater than 0", item.quantity)
    if item.unit_price <= 0:
        raise ValidationError(f"items[{index}].unit_price", "Unit price must be greater than 0", item.unit_price)


class BillBuilder:
    """
    Holds one in-progress bill for a billing session.

    Not shared across sessions; callers create one per user/session and
    pass it explicitly.
    """

    def __init__(
        self,
        data_service: IDataService,
        number_generator: Callable[[], str] | None = None,
    ):
        self._data_service = data_service
        self._number_generator = number_generator or generate_bill_number
        self._draft: Bill | None = None
        self._history: list[Bill] = []
        self._finalize_lock = asyncio.Lock()

    @property
    def draft(self) -> Bill | None:
        return self._draft

    @property
    def has_draft(self) -> bool:
        return self._draft is not None

    @property
    def history(self) -> tuple[Bill, ...]:
        """Bills finalized through this builder, oldest first."""
        return tuple(self._history)

    @property
    def finalizing(self) -> bool:
        return self._finalize_lock.locked()

    # ------------------------------------------------------------------
    # Draft lifecycle
    # ------------------------------------------------------------------

    def init_new_bill(self, customer: Customer) -> Bill:
        """Open a new empty draft for *customer*.

        An existing empty draft is replaced; one with items is not.

        Raises:
            DraftInProgressError: If the current draft has unsaved items.
        """
        self._ensure_not_finalizing()
        if self._draft is not None and self._draft.items:
            raise DraftInProgressError(self._draft.bill_number, len(self._draft.items))

        now = datetime.utcnow()
        self._draft = Bill(
            id=uuid4().hex,
            bill_number=self._number_generator(),
            customer=customer.snapshot(),
            created_at=now,
            updated_at=now,
        )
        logger.info(
            "draft_opened",
            bill_number=self._draft.bill_number,
            customer_id=customer.id,
        )
        return self._draft

    def discard_draft(self, force: bool = False) -> bool:
        """Drop the current draft.

        Empty drafts are always discarded. A draft with items is only
        discarded when ``force`` is set.

        Returns:
            True if a draft was discarded.

        Raises:
            DraftInProgressError: If the draft has items and ``force`` is False.
        """
        self._ensure_not_finalizing()
        if self._draft is None:
            return False
        if self._draft.items and not force:
            raise DraftInProgressError(self._draft.bill_number, len(self._draft.items))

        logger.info(
            "draft_discarded",
            bill_number=self._draft.bill_number,
            items=len(self._draft.items),
        )
        self._draft = None
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, item: BillItem) -> Bill:
        draft = self._require_draft("add_item")
        return self._replace(draft, items=[*draft.items, item])

    def update_item(self, index: int, item: BillItem) -> Bill:
        draft = self._require_draft("update_item")
        self._check_index(draft, index)
        items = list(draft.items)
        items[index] = item
        return self._replace(draft, items=items)

    def remove_item(self, index: int) -> Bill:
        draft = self._require_draft("remove_item")
        self._check_index(draft, index)
        items = [it for i, it in enumerate(draft.items) if i != index]
        return self._replace(draft, items=items)

    def set_bill_discount(self, discount_type: DiscountType | str, value: float) -> Bill:
        """Change the bill-level discount; items are left untouched.

        Raises:
            ValidationError: If the value is negative, or above 100 for a
                percentage.
        """
        draft = self._require_draft("set_bill_discount")
        value = check_discount(value, discount_type, field="bill_discount_value")
        return self._replace(
            draft,
            bill_discount_type=DiscountType(discount_type),
            bill_discount_value=value,
        )

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------

    async def finalize(self, note: str | None = None) -> Bill:
        """Validate and persist the draft.

        On success the persisted bill is appended to the history and the
        builder returns to the no-draft state. On any failure the draft is
        left exactly as it was.

        Raises:
            NoDraftError: If there is no draft.
            FinalizeInProgressError: If a finalize call is already running.
            ValidationError: If the draft has no items or an invalid item.
            PersistenceError: If the data service rejects the bill.
        """
        draft = self._require_draft("finalize")
        if self._finalize_lock.locked():
            raise FinalizeInProgressError(draft.bill_number)

        async with self._finalize_lock:
            if not draft.items:
                raise ValidationError("items", "A bill needs at least one item")
            for index, item in enumerate(draft.items):
                _check_item_structure(index, item)

            now = datetime.utcnow()
            to_save = draft.model_copy(
                update={
                    "note": note if note is not None else draft.note,
                    "created_at": now,
                    "updated_at": now,
                }
            )

            logger.info(
                "bill_finalize_started",
                bill_number=draft.bill_number,
                items=len(draft.items),
                total=draft.total,
            )
            try:
                result = await self._data_service.create_bill(to_save)
            except PersistenceError:
                raise
            except Exception as e:
                logger.error("bill_finalize_failed", bill_number=draft.bill_number, error=str(e))
                raise PersistenceError("create_bill", str(e)) from e

            if not result.success or result.entity is None:
                logger.warning(
                    "bill_finalize_rejected",
                    bill_number=draft.bill_number,
                    message=result.message,
                )
                raise PersistenceError("create_bill", result.message or "Failed to save bill")

            saved = result.entity
            self._history.append(saved)
            self._draft = None

        logger.info("bill_finalized", bill_id=saved.id, bill_number=saved.bill_number, total=saved.total)
        return saved

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_draft(self, operation: str) -> Bill:
        if self._draft is None:
            raise NoDraftError(operation)
        if operation != "finalize":
            self._ensure_not_finalizing()
        return self._draft

    def _ensure_not_finalizing(self) -> None:
        if self._finalize_lock.locked() and self._draft is not None:
            raise FinalizeInProgressError(self._draft.bill_number)

    @staticmethod
    def _check_index(draft: Bill, index: int) -> None:
        if not 0 <= index < len(draft.items):
            raise ItemIndexError(index, len(draft.items))

    def _replace(self, draft: Bill, **changes: object) -> Bill:
        """Swap in a new draft with *changes* applied and totals recomputed."""
        items = changes.get("items", draft.items)
        discount_type = changes.get("bill_discount_type", draft.bill_discount_type)
        discount_value = changes.get("bill_discount_value", draft.bill_discount_value)
        totals = bill_totals(items, discount_type, discount_value)  # type: ignore[arg-type]

        self._draft = draft.model_copy(
            update={
                **changes,
                "subtotal": totals.subtotal,
                "bill_discount_amount": totals.bill_discount_amount,
                "total_discount": totals.total_discount,
                "total": totals.total,
                "updated_at": datetime.utcnow(),
            }
        )
        return self._draft
