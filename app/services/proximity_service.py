"""Proximity query engine: published venues within a radius, nearest first."""
import base64
import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import ProximitySettings
from app.core import metrics_proximity
from app.core.cache_client import TTLCache
from app.core.exceptions import ErrorCode, InvalidQueryError, StorageUnavailableError
from app.core.geo import bounding_box, haversine_m, quantize
from app.core.validation import (
    ValidationError,
    clamp_limit,
    clamp_radius_km,
    normalize_category,
    normalize_text_query,
    parse_float,
    validate_latitude,
    validate_longitude,
)
from app.models.establishment import Establishment
from app.schemas.establishment import NearbyEstablishment, NearbyResponse
from app.services.establishment_repository import EstablishmentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NearbyQuery:
    lat: float
    lng: float
    radius_km: float
    category: str
    q: str
    limit: int

    @property
    def radius_m(self) -> float:
        return self.radius_km * 1000.0

    @property
    def cache_key(self) -> tuple:
        return (
            quantize(self.lat),
            quantize(self.lng),
            self.radius_km,
            self.category,
            self.q.lower(),
            self.limit,
        )


@dataclass(frozen=True)
class CachedNearby:
    body: bytes
    etag: str


@dataclass(frozen=True)
class NearbyResult:
    body: bytes
    etag: str
    cache_hit: bool

    def json(self) -> dict[str, Any]:
        return json.loads(self.body)


def compute_weak_etag(body: bytes) -> str:
    digest = base64.b64encode(hashlib.sha1(body).digest()).decode("ascii")
    return f'W/"{digest}"'


def create_nearby_cache(settings: ProximitySettings, clock=None) -> TTLCache[CachedNearby]:
    kwargs = {"clock": clock} if clock is not None else {}
    return TTLCache(
        ttl_seconds=settings.cache_ttl_seconds,
        max_entries=settings.cache_max_entries,
        name="nearby",
        **kwargs,
    )


class ProximityService:
    """
    Nearby venue search over the venue store.

    - validates and clamps query parameters before touching storage
    - bounding-box prefilter in the database, exact haversine filter in Python
    - short-TTL result cache keyed by quantized parameters
    """

    def __init__(
        self,
        cache: TTLCache[CachedNearby],
        settings: Optional[ProximitySettings] = None,
    ) -> None:
        self.cache = cache
        self.settings = settings or ProximitySettings()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def build_query(
        self,
        lat: Any,
        lng: Any,
        radius_km: Any = None,
        category: Optional[str] = None,
        q: Optional[str] = None,
        limit: Any = None,
    ) -> NearbyQuery:
        """
        Validate raw parameters into a NearbyQuery.

        Raises:
            InvalidQueryError: lat/lng missing, non-finite or out of range
        """
        try:
            lat_f = validate_latitude(parse_float(lat))
            lng_f = validate_longitude(parse_float(lng))
        except ValidationError as e:
            raise InvalidQueryError(
                f"{e}. Example: /api/establishments?lat=5.3261&lng=-4.0200&radiusKm=10&category=all",
                details={"lat": lat, "lng": lng},
                error_code=ErrorCode.INVALID_COORDINATES,
            ) from e

        s = self.settings
        radius = clamp_radius_km(
            parse_float(radius_km),
            default=s.default_radius_km,
            min_km=s.min_radius_km,
            max_km=s.max_radius_km,
        )
        default_limit = (
            s.default_limit_small_radius
            if radius <= s.small_radius_threshold_km
            else s.default_limit_large_radius
        )
        return NearbyQuery(
            lat=lat_f,
            lng=lng_f,
            radius_km=radius,
            category=normalize_category(category),
            q=normalize_text_query(q),
            limit=clamp_limit(parse_float(limit), default=default_limit, max_limit=s.max_limit),
        )

    async def query_nearby(
        self,
        db: AsyncSession,
        lat: Any,
        lng: Any,
        radius_km: Any = None,
        category: Optional[str] = None,
        q: Optional[str] = None,
        limit: Any = None,
    ) -> NearbyResult:
        """
        Published venues within radius_km of (lat, lng), nearest first.

        A cache hit returns the exact bytes of the earlier response without
        querying storage.
        """
        query = self.build_query(lat, lng, radius_km, category, q, limit)

        cached = self.cache.get(query.cache_key)
        if cached is not None:
            metrics_proximity.increment("nearby_cache_hits")
            return NearbyResult(body=cached.body, etag=cached.etag, cache_hit=True)
        metrics_proximity.increment("nearby_cache_misses")

        with metrics_proximity.record_nearby_latency():
            candidates = await self._fetch_candidates(db, query)
            ranked = self.rank(query, candidates)

        body = NearbyResponse(establishments=ranked).model_dump_json(by_alias=True).encode("utf-8")
        entry = CachedNearby(body=body, etag=compute_weak_etag(body))
        self.cache.set(query.cache_key, entry)

        logger.info(
            f"Nearby query ({query.lat:.4f}, {query.lng:.4f}) r={query.radius_km:.1f}km "
            f"category={query.category} -> {len(ranked)} of {len(candidates)} candidates"
        )
        return NearbyResult(body=entry.body, etag=entry.etag, cache_hit=False)

    def candidate_cap(self, limit: int) -> int:
        s = self.settings
        return min(s.candidate_ceiling, max(s.candidate_floor, limit * s.candidate_overfetch_factor))

    def rank(
        self,
        query: NearbyQuery,
        candidates: Iterable[Establishment],
    ) -> List[NearbyEstablishment]:
        """Exact distance filter, text filter, stable sort by distance, truncate."""
        needle = query.q.casefold()
        annotated: List[tuple[float, Establishment]] = []

        for est in candidates:
            distance = haversine_m(query.lat, query.lng, est.lat, est.lng)
            if distance > query.radius_m:
                continue
            if needle and needle not in self._haystack(est):
                continue
            annotated.append((distance, est))

        annotated.sort(key=lambda pair: pair[0])

        return [
            NearbyEstablishment.model_validate(
                {**self._row_fields(est), "distance_meters": distance}
            )
            for distance, est in annotated[: query.limit]
        ]

    def invalidate(self) -> None:
        """Drop cached results after venues are created, moderated or imported."""
        self.cache.clear()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _fetch_candidates(self, db: AsyncSession, query: NearbyQuery) -> List[Establishment]:
        box = bounding_box(query.lat, query.lng, query.radius_km)
        repo = EstablishmentRepository(db)
        try:
            return await repo.fetch_candidates(
                box,
                origin_lat=query.lat,
                origin_lng=query.lng,
                category=query.category,
                limit=self.candidate_cap(query.limit),
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Nearby candidate fetch failed: {type(e).__name__}: {e}")
            raise StorageUnavailableError("nearby_query") from e

    @staticmethod
    def _haystack(est: Establishment) -> str:
        return f"{est.name or ''} {est.address or ''} {est.commune or ''} {est.category or ''}".casefold()

    @staticmethod
    def _row_fields(est: Establishment) -> dict[str, Any]:
        return {
            "id": est.id,
            "name": est.name,
            "category": est.category,
            "address": est.address,
            "commune": est.commune,
            "phone": est.phone,
            "description": est.description,
            "photos": est.photos,
            "lat": est.lat,
            "lng": est.lng,
            "published": est.published,
            "created_at": est.created_at,
        }
