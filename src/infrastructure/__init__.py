"""Infrastructure layer implementations."""

from src.infrastructure import export, pdf, storage

__all__ = ["storage", "pdf", "export"]
