"""Great-circle distance, bounding boxes and coordinate quantization."""
import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6_371_000.0
KM_PER_DEGREE = 111.32
# Floor on cos(lat) when widening the longitude span; over-fetches near the poles
MIN_LNG_SCALE = 0.2
QUANTIZE_DECIMALS = 4


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Compute great-circle distance between two points (degrees), in metres.

    The sqrt term is clamped to 1 so rounding near antipodal points
    cannot push asin out of its domain.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lng2 - lng1)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """Flat-degree box around a point, loose enough to contain the radius circle."""
    d_lat = radius_km / KM_PER_DEGREE
    d_lng = radius_km / (KM_PER_DEGREE * max(MIN_LNG_SCALE, math.cos(math.radians(lat))))
    return BoundingBox(
        min_lat=lat - d_lat,
        max_lat=lat + d_lat,
        min_lng=lng - d_lng,
        max_lng=lng + d_lng,
    )


def quantize(value: float, decimals: int = QUANTIZE_DECIMALS) -> float:
    """Round half up to a fixed precision (4 decimals is ~11 m) for cache keys."""
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale
