"""
Health check and metrics endpoints.
"""

from fastapi import APIRouter
import time

from coffee_finder.config.settings import get_settings
from coffee_finder.core.error_handlers import error_handler
from coffee_finder.core.metrics import snapshot_metrics

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "data": {
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment.value,
            "uptime_seconds": round(time.time() - _app_start_time, 3),
        },
        "error": None,
    }


@router.get("/metrics/search")
async def search_metrics():
    payload = snapshot_metrics()
    payload["errors"] = error_handler.get_error_statistics()
    return {"status": "ok", "data": payload, "error": None}
