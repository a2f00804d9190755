"""Storage implementations."""

from src.infrastructure.storage.memory_data_service import InMemoryDataService

__all__ = ["InMemoryDataService"]
