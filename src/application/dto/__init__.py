"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from src.application.dto.requests import (
    BillDiscountRequest,
    BillItemRequest,
    CustomerRequest,
    FinalizeBillRequest,
    OpenDraftRequest,
    ProductRequest,
)
from src.application.dto.responses import (
    BillItemResponse,
    BillListResponse,
    BillResponse,
    BillStatsResponse,
    CustomerResponse,
    ErrorResponse,
    ExportResponse,
    HealthResponse,
    ProductResponse,
    SessionResponse,
)

__all__ = [
    # Requests
    "CustomerRequest",
    "ProductRequest",
    "OpenDraftRequest",
    "BillItemRequest",
    "BillDiscountRequest",
    "FinalizeBillRequest",
    # Responses
    "CustomerResponse",
    "ProductResponse",
    "BillItemResponse",
    "BillResponse",
    "BillListResponse",
    "BillStatsResponse",
    "SessionResponse",
    "ExportResponse",
    "HealthResponse",
    "ErrorResponse",
]
