"""Application use cases."""

from src.application.use_cases.export_invoice import (
    ExportInvoiceUseCase,
    ExportResult,
    invoice_file_name,
)

__all__ = [
    "ExportInvoiceUseCase",
    "ExportResult",
    "invoice_file_name",
]
