"""
Monitoring Routes

Health check and Prometheus metrics endpoints.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from updater.config import settings
from updater.utils.metrics import set_app_info

router = APIRouter(tags=["Monitoring"])

# Application start time for uptime calculation
APP_START_TIME = time.time()

set_app_info(version=settings.app_version, environment=settings.environment)


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    version: str
    uptime_seconds: float


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """Liveness probe; does not touch the manifest endpoint."""
    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        uptime_seconds=round(time.time() - APP_START_TIME, 2),
    )


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
