"""Abstract interface for invoice export targets."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class ExportMode(str, Enum):
    """How a rendered invoice leaves the system."""

    DOWNLOAD = "download"
    PRINT = "print"

    @property
    def alternate(self) -> "ExportMode":
        return ExportMode.PRINT if self is ExportMode.DOWNLOAD else ExportMode.DOWNLOAD


@dataclass
class ExportReceipt:
    """Where an exported document ended up."""

    mode: ExportMode
    file_name: str
    location: str


class IExportSink(ABC):
    """Saves or prints rendered invoice documents.

    Both operations may fail (blocked print dialog, I/O error) and raise
    ``ExportError``.
    """

    @abstractmethod
    async def save(self, document: bytes, file_name: str) -> ExportReceipt:
        """Save *document* under *file_name*."""
        pass

    @abstractmethod
    async def print(self, document: bytes, file_name: str) -> ExportReceipt:
        """Send *document* to a print-capable target."""
        pass
