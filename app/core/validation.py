"""
Input validation utilities for nearby queries
"""
import math
from typing import Any, Optional

WILDCARD_CATEGORY = "all"


class ValidationError(Exception):
    """Custom validation error"""
    pass


def parse_float(value: Any) -> Optional[float]:
    """Parse a query value into a float, None when absent or unparseable."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_latitude(lat: Optional[float]) -> float:
    """
    Validate latitude coordinate

    Args:
        lat: Latitude value

    Returns:
        Validated latitude

    Raises:
        ValidationError: If latitude is missing, non-finite or out of range
    """
    if lat is None or not math.isfinite(lat):
        raise ValidationError("Latitude is required and must be a finite number")

    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude {lat} out of range (must be between -90 and 90)")

    return lat


def validate_longitude(lng: Optional[float]) -> float:
    """
    Validate longitude coordinate

    Args:
        lng: Longitude value

    Returns:
        Validated longitude

    Raises:
        ValidationError: If longitude is missing, non-finite or out of range
    """
    if lng is None or not math.isfinite(lng):
        raise ValidationError("Longitude is required and must be a finite number")

    if not -180.0 <= lng <= 180.0:
        raise ValidationError(f"Longitude {lng} out of range (must be between -180 and 180)")

    return lng


def clamp_radius_km(
    radius_km: Optional[float],
    default: float = 10.0,
    min_km: float = 1.0,
    max_km: float = 50.0,
) -> float:
    """Clamp a search radius in kilometres; missing or non-finite falls back to default."""
    if radius_km is None or not math.isfinite(radius_km):
        radius_km = default
    return min(max_km, max(min_km, radius_km))


def clamp_limit(
    limit: Optional[float],
    default: int,
    max_limit: int = 5000,
) -> int:
    """Clamp a result limit to [1, max_limit]; missing or non-finite falls back to default."""
    if limit is None or not math.isfinite(limit):
        limit = default
    return int(min(max_limit, max(1, int(limit))))


def normalize_category(category: Optional[str]) -> str:
    """Empty or missing category means the wildcard; unknown tags pass through."""
    if category is None:
        return WILDCARD_CATEGORY
    category = category.strip()
    return category or WILDCARD_CATEGORY


def normalize_text_query(q: Optional[str]) -> str:
    return (q or "").strip()
