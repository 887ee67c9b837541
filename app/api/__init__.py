# API endpoints and routers

from .establishment_endpoints import router as establishment_router
from .admin_endpoints import router as admin_router
from .navigation_endpoints import router as navigation_router
from .health_endpoints import router as health_router
from .metrics_endpoints import router as metrics_router

__all__ = [
    "establishment_router",
    "admin_router",
    "navigation_router",
    "health_router",
    "metrics_router",
]
