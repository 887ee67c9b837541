# Business logic services

from .establishment_repository import EstablishmentRepository
from .proximity_service import ProximityService, NearbyQuery, NearbyResult, create_nearby_cache
from .directions_client import DirectionsClient
from .route_cache import RouteCache, route_key
from .formatting import format_distance, format_duration
from .navigation_tracker import NavigationTracker
from .places_client import GooglePlacesClient
from .places_import import (
    PlacesImportService,
    map_google_types_to_category,
    infer_commune_from_address,
)

__all__ = [
    "EstablishmentRepository",
    "ProximityService",
    "NearbyQuery",
    "NearbyResult",
    "create_nearby_cache",
    "DirectionsClient",
    "RouteCache",
    "route_key",
    "format_distance",
    "format_duration",
    "NavigationTracker",
    "GooglePlacesClient",
    "PlacesImportService",
    "map_google_types_to_category",
    "infer_commune_from_address",
]
