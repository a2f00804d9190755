"""Abstract interfaces for infrastructure collaborators."""

from src.core.interfaces.data_service import DataServiceResult, IDataService
from src.core.interfaces.export_sink import ExportMode, ExportReceipt, IExportSink

__all__ = [
    "IDataService",
    "DataServiceResult",
    "IExportSink",
    "ExportMode",
    "ExportReceipt",
]
