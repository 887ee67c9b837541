"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from app.config.settings import get_settings
from app.core.dependencies import ServiceContainer
from app.core.error_handlers import setup_error_handlers
from app.core.logging import configure_logging
from app.middleware.request_context import RequestContextMiddleware

# Get application settings
settings = get_settings()

configure_logging(settings.log_level.value, plain_format=settings.log_line_format)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    container: ServiceContainer = app.state.service_container
    try:
        await container.initialize_services()
        if container.settings.database.create_tables:
            await container.get_database().create_all()

        logger.info("Application startup complete")

        yield

    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise

    finally:
        # Shutdown
        logger.info("Shutting down application")
        await container.cleanup_services()
        logger.info("Application shutdown complete")


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: Pre-built service container (tests inject one with
            mock HTTP transports); a default one is built from settings.

    Returns:
        FastAPI: Configured application instance
    """
    container = container or ServiceContainer(settings)
    app_settings = container.settings

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan
    )
    app.state.service_container = container

    # Add CORS middleware with configuration
    app.add_middleware(
        CORSMiddleware,
        **app_settings.get_cors_config()
    )

    # Request id + access log
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    # Include API routers
    from app.api import (
        admin_router,
        establishment_router,
        health_router,
        metrics_router,
        navigation_router,
    )
    app.include_router(establishment_router)
    app.include_router(admin_router)
    app.include_router(navigation_router)
    app.include_router(health_router)
    app.include_router(metrics_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic liveness."""
        return {
            "message": f"Welcome to {app_settings.app_name}",
            "version": app_settings.app_version,
            "status": "running"
        }

    return app


# Create application instance
app = create_app()
