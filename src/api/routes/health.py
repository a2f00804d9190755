"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from src.api.dependencies import get_app_settings, get_data, get_sessions
from src.application.dto.responses import HealthResponse
from src.application.sessions import BillingSessionRegistry
from src.config import Settings
from src.core.interfaces.data_service import IDataService

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/full", response_model=HealthResponse)
async def full_health_check(
    settings: Settings = Depends(get_app_settings),
    data: IDataService = Depends(get_data),
    sessions: BillingSessionRegistry = Depends(get_sessions),
) -> HealthResponse:
    """
    Full health check.

    Also reports record counts from the data service; a failing data
    service marks the status as degraded.
    """
    status_str = "healthy"
    counts = {"customers": 0, "products": 0, "bills": 0}
    try:
        counts["customers"] = len(await data.list_user_customers())
        counts["products"] = len(await data.list_user_products())
        counts["bills"] = len(await data.list_user_bills())
    except Exception:
        status_str = "degraded"

    return HealthResponse(
        status=status_str,
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        sessions=len(sessions),
        **counts,
    )
