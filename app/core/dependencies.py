"""
Dependency injection setup for FastAPI.
Provides dependency providers for core services with lifecycle management.
"""

from fastapi import Depends, Request, HTTPException
from typing import Callable, Optional
import asyncio
import hmac
import logging

import httpx

from app.config.settings import Settings, get_settings
from app.core.db import Database
from app.core.exceptions import AdminAuthError, ErrorCode, VenueServiceException
from app.services.directions_client import DirectionsClient
from app.services.places_client import GooglePlacesClient
from app.services.places_import import PlacesImportService
from app.services.proximity_service import ProximityService, create_nearby_cache
from app.services.route_cache import RouteCache


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Owns the database and the long-lived services for one application instance.

    HTTP clients and the cache clock can be injected so tests run against
    mock transports and a controllable time source.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        database: Optional[Database] = None,
        directions_http: Optional[httpx.AsyncClient] = None,
        places_http: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], float]] = None,
        places_sleep: Optional[Callable] = None,
    ):
        self.settings = settings or get_settings()
        self._database = database
        self._directions_http = directions_http
        self._places_http = places_http
        self._clock = clock
        self._places_sleep = places_sleep

        self._proximity_service: Optional[ProximityService] = None
        self._directions_client: Optional[DirectionsClient] = None
        self._route_cache: Optional[RouteCache] = None
        self._places_client: Optional[GooglePlacesClient] = None
        self._places_import: Optional[PlacesImportService] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    async def initialize_services(self) -> None:
        """
        Initialize all services in dependency order.
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")

            try:
                s = self.settings
                if self._database is None:
                    self._database = Database(s.database.url, echo=s.database.echo)

                self._proximity_service = ProximityService(
                    create_nearby_cache(s.proximity, clock=self._clock),
                    settings=s.proximity,
                )

                self._directions_client = DirectionsClient(
                    settings=s.directions, http_client=self._directions_http
                )
                self._route_cache = RouteCache(
                    self._directions_client, settings=s.directions, clock=self._clock
                )

                places_kwargs = {"sleep": self._places_sleep} if self._places_sleep else {}
                self._places_client = GooglePlacesClient(
                    settings=s.places, http_client=self._places_http, **places_kwargs
                )
                self._places_import = PlacesImportService(
                    self._places_client, max_photos=s.places.max_photos_per_place
                )

                self._initialized = True
                logger.info("Service container initialization completed")

            except Exception as e:
                logger.error(f"Service container initialization failed: {e}", exc_info=True)
                raise

    async def cleanup_services(self) -> None:
        """
        Close HTTP clients and the database engine.
        """
        logger.info("Cleaning up service container")

        try:
            if self._directions_client:
                await self._directions_client.aclose()
            if self._places_client:
                await self._places_client.aclose()
            if self._database:
                await self._database.dispose()

            self._places_import = None
            self._places_client = None
            self._route_cache = None
            self._directions_client = None
            self._proximity_service = None

            logger.info("Service container cleanup completed")

        except Exception as e:
            logger.error(f"Service container cleanup failed: {e}", exc_info=True)
        finally:
            self._initialized = False

    def _require(self, service, name: str):
        if not self._initialized or service is None:
            raise RuntimeError(f"Service container not initialized ({name})")
        return service

    def get_database(self) -> Database:
        return self._require(self._database, "database")

    def get_proximity_service(self) -> ProximityService:
        return self._require(self._proximity_service, "proximity")

    def get_route_cache(self) -> RouteCache:
        return self._require(self._route_cache, "route cache")

    def get_places_import(self) -> PlacesImportService:
        return self._require(self._places_import, "places import")

    def invalidate_nearby(self) -> None:
        """Called after every venue mutation."""
        if self._proximity_service is not None:
            self._proximity_service.invalidate()


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.

    Raises:
        HTTPException: If service container is not available
    """
    if not hasattr(request.app.state, 'service_container'):
        logger.error("Service container not initialized")
        raise HTTPException(
            status_code=503,
            detail="Service container not available"
        )

    return request.app.state.service_container


def _provide(getter_name: str, label: str):
    def provider(container: ServiceContainer = Depends(get_service_container)):
        try:
            return getattr(container, getter_name)()
        except RuntimeError as e:
            logger.error(f"{label} not available: {e}")
            raise HTTPException(status_code=503, detail=f"{label} not available")
    provider.__name__ = f"provide_{getter_name}"
    return provider


get_proximity_service = _provide("get_proximity_service", "Proximity service")
get_route_cache = _provide("get_route_cache", "Route cache")
get_places_import = _provide("get_places_import", "Places import")


def get_request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


async def require_admin(
    request: Request,
    container: ServiceContainer = Depends(get_service_container),
) -> None:
    """
    Gate admin endpoints on the shared admin token header.

    Raises:
        AdminAuthError: 401 when the header is missing, 403 when it does not match
    """
    security = container.settings.security
    supplied = request.headers.get(security.admin_token_header)
    if not supplied:
        raise AdminAuthError(missing=True)

    expected = security.admin_token or ""
    if not expected or not hmac.compare_digest(supplied.encode(), expected.encode()):
        logger.warning(
            "Rejected admin request",
            extra={"request_id": get_request_id(request), "request_path": request.url.path},
        )
        raise AdminAuthError(missing=False)


async def require_user_id(request: Request) -> str:
    """Submitting account for direct venue creation, taken from X-User-Id."""
    user_id = (request.headers.get("X-User-Id") or "").strip()
    if not user_id:
        raise VenueServiceException(
            message="X-User-Id header required",
            error_code=ErrorCode.MISSING_USER,
            status_code=401,
        )
    return user_id
