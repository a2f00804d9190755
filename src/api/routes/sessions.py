"""
Billing session endpoints.

A session owns one draft bill at a time. The draft is built up item by
item and finalized into a saved bill.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import find_customer, find_product, get_data, get_sessions
from src.application.dto.requests import (
    BillDiscountRequest,
    BillItemRequest,
    FinalizeBillRequest,
    OpenDraftRequest,
)
from src.application.dto.responses import BillResponse, ErrorResponse, SessionResponse
from src.application.sessions import BillingSessionRegistry
from src.core.exceptions import NoDraftError
from src.core.interfaces.data_service import IDataService
from src.core.services.bill_builder import BillBuilder, build_bill_item

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _session_response(session_id: str, builder: BillBuilder) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        has_draft=builder.has_draft,
        finalized_count=len(builder.history),
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> SessionResponse:
    """Start a billing session."""
    session_id, builder = sessions.create()
    return _session_response(session_id, builder)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_session(
    session_id: str,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> SessionResponse:
    return _session_response(session_id, sessions.get(session_id))


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def close_session(
    session_id: str,
    force: bool = False,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> None:
    """End a session. A draft with items is only dropped with ``force``."""
    sessions.close(session_id, force=force)


# --- Draft ---


@router.post(
    "/{session_id}/draft",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def open_draft(
    session_id: str,
    request: OpenDraftRequest,
    sessions: BillingSessionRegistry = Depends(get_sessions),
    data: IDataService = Depends(get_data),
) -> BillResponse:
    """Open a new draft bill for a customer."""
    builder = sessions.get(session_id)
    customer = await find_customer(data, request.customer_id)
    return BillResponse.from_entity(builder.init_new_bill(customer))


@router.get(
    "/{session_id}/draft",
    response_model=BillResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def get_draft(
    session_id: str,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> BillResponse:
    """Current draft with its computed totals."""
    builder = sessions.get(session_id)
    if builder.draft is None:
        raise NoDraftError("get_draft")
    return BillResponse.from_entity(builder.draft)


@router.delete(
    "/{session_id}/draft",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def discard_draft(
    session_id: str,
    force: bool = False,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> None:
    """Discard the draft. One with items needs ``force=true``."""
    sessions.get(session_id).discard_draft(force=force)


@router.post(
    "/{session_id}/draft/items",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_item(
    session_id: str,
    request: BillItemRequest,
    sessions: BillingSessionRegistry = Depends(get_sessions),
    data: IDataService = Depends(get_data),
) -> BillResponse:
    """Add a product line to the draft."""
    builder = sessions.get(session_id)
    product = await find_product(data, request.product_id)
    item = build_bill_item(
        product,
        request.quantity,
        request.discount_type,
        request.discount_value,
        unit_price=request.unit_price,
    )
    return BillResponse.from_entity(builder.add_item(item))


@router.put(
    "/{session_id}/draft/items/{index}",
    response_model=BillResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_item(
    session_id: str,
    index: int,
    request: BillItemRequest,
    sessions: BillingSessionRegistry = Depends(get_sessions),
    data: IDataService = Depends(get_data),
) -> BillResponse:
    """Replace the line at ``index``."""
    builder = sessions.get(session_id)
    product = await find_product(data, request.product_id)
    item = build_bill_item(
        product,
        request.quantity,
        request.discount_type,
        request.discount_value,
        unit_price=request.unit_price,
    )
    return BillResponse.from_entity(builder.update_item(index, item))


@router.delete(
    "/{session_id}/draft/items/{index}",
    response_model=BillResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def remove_item(
    session_id: str,
    index: int,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> BillResponse:
    """Remove the line at ``index``."""
    return BillResponse.from_entity(sessions.get(session_id).remove_item(index))


@router.put(
    "/{session_id}/draft/discount",
    response_model=BillResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def set_bill_discount(
    session_id: str,
    request: BillDiscountRequest,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> BillResponse:
    """Set the bill-level discount."""
    builder = sessions.get(session_id)
    return BillResponse.from_entity(
        builder.set_bill_discount(request.discount_type, request.discount_value)
    )


@router.post(
    "/{session_id}/draft/finalize",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse, "description": "Data service rejected the bill"},
    },
)
async def finalize_draft(
    session_id: str,
    request: FinalizeBillRequest | None = None,
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> BillResponse:
    """Save the draft as a bill. The draft is left intact on failure."""
    builder = sessions.get(session_id)
    saved = await builder.finalize(note=request.note if request else None)
    return BillResponse.from_entity(saved)
