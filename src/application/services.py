"""
Service factory functions for dependency injection.

Wires infrastructure implementations to the core services and use
cases. API dependencies and the CLI import from here.
"""

from datetime import timedelta

from src.application.sessions import BillingSessionRegistry
from src.application.use_cases.export_invoice import ExportInvoiceUseCase
from src.config import get_settings
from src.core.entities.issuer import Issuer
from src.core.interfaces.data_service import IDataService
from src.core.interfaces.export_sink import IExportSink
from src.core.services.invoice_layout import IInvoicePdfRenderer

# Singleton service instances
_data_service: IDataService | None = None
_session_registry: BillingSessionRegistry | None = None
_invoice_renderer: IInvoicePdfRenderer | None = None
_export_sink: IExportSink | None = None


def get_data_service() -> IDataService:
    """Get or create the data service."""
    global _data_service
    if _data_service is None:
        from src.infrastructure.storage import InMemoryDataService

        _data_service = InMemoryDataService()
    return _data_service


def get_session_registry() -> BillingSessionRegistry:
    """Get or create the billing session registry."""
    global _session_registry
    if _session_registry is None:
        settings = get_settings().billing
        _session_registry = BillingSessionRegistry(
            get_data_service(),
            idle_timeout=timedelta(minutes=settings.session_idle_minutes),
        )
    return _session_registry


def get_invoice_renderer() -> IInvoicePdfRenderer:
    """Get or create the invoice PDF renderer."""
    global _invoice_renderer
    if _invoice_renderer is None:
        from src.infrastructure.pdf import Fpdf2InvoiceRenderer

        _invoice_renderer = Fpdf2InvoiceRenderer()
    return _invoice_renderer


def get_export_sink() -> IExportSink:
    """Get or create the export sink."""
    global _export_sink
    if _export_sink is None:
        from src.infrastructure.export import LocalExportSink

        _export_sink = LocalExportSink()
    return _export_sink


def get_issuer() -> Issuer:
    """Issuer profile from ``ISSUER_*`` settings."""
    return Issuer(**get_settings().issuer.model_dump())


def get_export_invoice_use_case(issuer: Issuer | None = None) -> ExportInvoiceUseCase:
    return ExportInvoiceUseCase(
        renderer=get_invoice_renderer(),
        sink=get_export_sink(),
        issuer=issuer or get_issuer(),
    )


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _data_service, _session_registry, _invoice_renderer, _export_sink
    _data_service = None
    _session_registry = None
    _invoice_renderer = None
    _export_sink = None
