"""Bill history and invoice export endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.api.dependencies import find_bill, get_data, get_export_use_case
from src.application.dto.responses import (
    BillListResponse,
    BillResponse,
    BillStatsResponse,
    ErrorResponse,
    ExportResponse,
)
from src.application.use_cases import ExportInvoiceUseCase
from src.core.entities.bill import PaymentStatus
from src.core.exceptions import PersistenceError
from src.core.interfaces.data_service import IDataService
from src.core.interfaces.export_sink import ExportMode
from src.core.services.history import bill_stats, search_bills

router = APIRouter(prefix="/api/bills", tags=["bills"])


@router.get("", response_model=BillListResponse)
async def list_bills(
    q: str | None = None,
    status: PaymentStatus | None = None,
    data: IDataService = Depends(get_data),
) -> BillListResponse:
    """Saved bills, newest first.

    ``q`` matches bill number, customer name or customer phone.
    """
    bills = search_bills(await data.list_user_bills(), q, status)
    return BillListResponse(
        bills=[BillResponse.from_entity(b) for b in bills],
        total=len(bills),
    )


@router.get("/stats", response_model=BillStatsResponse)
async def get_bill_stats(data: IDataService = Depends(get_data)) -> BillStatsResponse:
    """Revenue, average bill value and units sold across all bills."""
    return BillStatsResponse.from_stats(bill_stats(await data.list_user_bills()))


@router.get(
    "/{bill_id}",
    response_model=BillResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_bill(
    bill_id: str,
    data: IDataService = Depends(get_data),
) -> BillResponse:
    return BillResponse.from_entity(await find_bill(data, bill_id))


@router.delete(
    "/{bill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def delete_bill(
    bill_id: str,
    data: IDataService = Depends(get_data),
) -> None:
    """Remove a bill from history."""
    await find_bill(data, bill_id)
    result = await data.delete_bill(bill_id)
    if not result.success:
        raise PersistenceError("delete_bill", result.message)


@router.get(
    "/{bill_id}/pdf",
    responses={
        404: {"model": ErrorResponse, "description": "Bill not found"},
        422: {"model": ErrorResponse, "description": "Bill cannot be rendered"},
    },
)
async def get_bill_pdf(
    bill_id: str,
    data: IDataService = Depends(get_data),
    use_case: ExportInvoiceUseCase = Depends(get_export_use_case),
) -> Response:
    """Render the tax invoice and return it as a download."""
    bill = await find_bill(data, bill_id)
    pdf_bytes, file_name = use_case.render(bill)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.post(
    "/{bill_id}/export",
    response_model=ExportResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse, "description": "Both export modes failed"},
    },
)
async def export_bill(
    bill_id: str,
    mode: ExportMode = ExportMode.DOWNLOAD,
    data: IDataService = Depends(get_data),
    use_case: ExportInvoiceUseCase = Depends(get_export_use_case),
) -> ExportResponse:
    """Save or print the invoice, falling back to the other mode on failure."""
    bill = await find_bill(data, bill_id)
    result = await use_case.execute(bill, mode)
    return ExportResponse(
        bill_number=bill.bill_number,
        requested_mode=result.requested_mode.value,
        mode=result.receipt.mode.value,
        fell_back=result.fell_back,
        file_name=result.file_name,
        location=result.receipt.location,
        file_size=result.file_size,
    )
