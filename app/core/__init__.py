"""
Core building blocks for the venue discovery backend: storage, caching,
geometry, validation, errors and metrics.
"""

from .cache_client import TTLCache, CacheStats
from .geo import BoundingBox, bounding_box, haversine_m, quantize
from .exceptions import (
    ErrorCode,
    VenueServiceException,
    InvalidQueryError,
    NotFoundError,
    AdminAuthError,
    StorageUnavailableError,
    ProviderError,
)

__all__ = [
    "TTLCache",
    "CacheStats",
    "BoundingBox",
    "bounding_box",
    "haversine_m",
    "quantize",
    "ErrorCode",
    "VenueServiceException",
    "InvalidQueryError",
    "NotFoundError",
    "AdminAuthError",
    "StorageUnavailableError",
    "ProviderError",
]
