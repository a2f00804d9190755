"""
Export Invoice Use Case.

Renders a finalized bill to PDF and hands it to an export sink, either
saved as a download or sent to a printer. If the requested mode fails the
other one is tried before giving up.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from src.config import get_logger
from src.core.entities.bill import Bill
from src.core.entities.issuer import Issuer
from src.core.exceptions import ExportError
from src.core.interfaces.export_sink import ExportMode, ExportReceipt, IExportSink
from src.core.services.invoice_layout import IInvoicePdfRenderer

logger = get_logger(__name__)


def invoice_file_name(bill_number: str | None, on: date | None = None) -> str:
    """``Invoice_<billNumber>_<YYYY-MM-DD>.pdf``; ``bill`` stands in for an empty number."""
    day = (on or date.today()).isoformat()
    return f"Invoice_{bill_number or 'bill'}_{day}.pdf"


@dataclass
class ExportResult:
    """Result of an invoice export."""

    receipt: ExportReceipt
    requested_mode: ExportMode
    file_name: str
    file_size: int

    @property
    def fell_back(self) -> bool:
        return self.receipt.mode is not self.requested_mode


class ExportInvoiceUseCase:
    """
    Use case for exporting invoice PDFs.

    Flow:
    1. Render the bill via the PDF renderer
    2. Try the requested export mode
    3. On ExportError, try the alternate mode
    4. Raise ExportError if both fail
    """

    def __init__(
        self,
        renderer: IInvoicePdfRenderer,
        sink: IExportSink,
        issuer: Issuer,
        today: Callable[[], date] = date.today,
    ):
        self._renderer = renderer
        self._sink = sink
        self._issuer = issuer
        self._today = today

    def render(self, bill: Bill) -> tuple[bytes, str]:
        """Render *bill* and return ``(pdf_bytes, file_name)``.

        Raises:
            RenderError: If the bill cannot be laid out.
        """
        pdf_bytes = self._renderer.render(bill, self._issuer)
        return pdf_bytes, invoice_file_name(bill.bill_number, self._today())

    async def execute(self, bill: Bill, mode: ExportMode | str = ExportMode.DOWNLOAD) -> ExportResult:
        """
        Render and export a bill.

        Args:
            bill: The finalized bill.
            mode: ``download`` or ``print``.

        Returns:
            ExportResult describing where the document went.

        Raises:
            RenderError: If the bill cannot be rendered.
            ExportError: If both export modes fail.
        """
        mode = ExportMode(mode)
        logger.info("invoice_export_started", bill_number=bill.bill_number, mode=mode.value)

        pdf_bytes, file_name = self.render(bill)

        try:
            receipt = await self._send(mode, pdf_bytes, file_name)
        except ExportError as first:
            fallback = mode.alternate
            logger.warning(
                "invoice_export_fallback",
                bill_number=bill.bill_number,
                failed_mode=mode.value,
                fallback_mode=fallback.value,
                error=first.message,
            )
            try:
                receipt = await self._send(fallback, pdf_bytes, file_name)
            except ExportError as second:
                logger.error(
                    "invoice_export_failed",
                    bill_number=bill.bill_number,
                    error=second.message,
                )
                raise ExportError(
                    mode.value,
                    f"{mode.value} and {fallback.value} both failed",
                ) from second

        logger.info(
            "invoice_export_complete",
            bill_number=bill.bill_number,
            mode=receipt.mode.value,
            location=receipt.location,
        )
        return ExportResult(
            receipt=receipt,
            requested_mode=mode,
            file_name=file_name,
            file_size=len(pdf_bytes),
        )

    async def _send(self, mode: ExportMode, pdf_bytes: bytes, file_name: str) -> ExportReceipt:
        if mode is ExportMode.PRINT:
            return await self._sink.print(pdf_bytes, file_name)
        return await self._sink.save(pdf_bytes, file_name)
