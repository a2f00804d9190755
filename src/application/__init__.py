"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from src.application.services import (
    get_data_service,
    get_export_invoice_use_case,
    get_export_sink,
    get_invoice_renderer,
    get_issuer,
    get_session_registry,
    reset_services,
)
from src.application.sessions import BillingSessionRegistry
from src.application.use_cases import ExportInvoiceUseCase, ExportResult

__all__ = [
    "BillingSessionRegistry",
    "ExportInvoiceUseCase",
    "ExportResult",
    "get_data_service",
    "get_session_registry",
    "get_invoice_renderer",
    "get_export_sink",
    "get_issuer",
    "get_export_invoice_use_case",
    "reset_services",
]
