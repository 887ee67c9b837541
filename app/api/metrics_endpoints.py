"""
Metrics endpoint for observability and monitoring.
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging

from app.core.dependencies import ServiceContainer, get_service_container
from app.core.error_handlers import error_handler
from app.core.metrics_proximity import snapshot_metrics

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("")
async def get_metrics(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Any]:
    """
    Latency percentiles, cache counters and error counts.
    """
    proximity = container.get_proximity_service()
    routes = container.get_route_cache()

    return {
        "latency": snapshot_metrics(),
        "caches": {
            "nearby": {"size": len(proximity.cache), **proximity.cache.stats.as_dict()},
            "routes": {
                "size": len(routes.cache),
                "inflight": routes.inflight_count,
                **routes.cache.stats.as_dict(),
            },
        },
        "errors": error_handler.get_error_statistics(),
    }
