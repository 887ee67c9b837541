"""
Health check endpoint.

GET /health reports storage reachability, provider configuration and uptime.
"""

from fastapi import APIRouter, Depends, Response, status
from typing import Dict, Any
import logging
import time
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.dependencies import ServiceContainer, get_request_id, get_service_container

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get(
    "/health",
    summary="Basic health check",
    description="Returns application health with storage and provider status"
)
async def health_check(
    response: Response,
    container: ServiceContainer = Depends(get_service_container),
    request_id: str = Depends(get_request_id)
) -> Dict[str, Any]:
    """
    Storage is probed with a trivial query; an unreachable store turns the
    whole response into 503 "degraded". Missing provider credentials are
    reported but do not fail the check.
    """
    storage_ok = True
    try:
        async with container.get_database().session() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, RuntimeError) as e:
        storage_ok = False
        logger.warning(
            f"Health check storage probe failed: {e}",
            extra={'request_id': request_id}
        )

    s = container.settings
    if not storage_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if storage_ok else "degraded",
        "version": s.app_version,
        "environment": s.environment.value,
        "uptime_seconds": int(time.time() - _app_start_time),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "storage": storage_ok,
            "directions_configured": bool(s.directions.access_token),
            "places_configured": bool(s.places.api_key),
        },
    }
