"""
Admin import of venues from Google Places into the establishments table.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidQueryError, StorageUnavailableError
from app.schemas.establishment import ImportNearbyRequest, ImportNearbyResponse
from app.services.establishment_repository import EstablishmentRepository
from app.services.places_client import PROVIDER_NAME, GooglePlacesClient

logger = logging.getLogger(__name__)

ALLOWED_GOOGLE_TYPES = (
    "restaurant",
    "bar",
    "night_club",
    "lodging",
    "liquor_store",
    "pharmacy",
    "police",
    "hospital",
    "fire_station",
    "doctor",
)

# First matching rule wins; order matters ("deux plateaux" before "plateau")
COMMUNE_RULES = (
    ("cocody", "Cocody"),
    ("angré", "Cocody"),
    ("angre", "Cocody"),
    ("riviera", "Cocody"),
    ("deux plateaux", "Cocody"),
    ("2 plateaux", "Cocody"),
    ("plateau", "Plateau"),
    ("treichville", "Treichville"),
    ("marcory", "Marcory"),
    ("koumassi", "Koumassi"),
    ("port-bouët", "Port-Bouët"),
    ("port bouet", "Port-Bouët"),
    ("yopougon", "Yopougon"),
    ("abobo", "Abobo"),
    ("adjame", "Adjamé"),
    ("adjamé", "Adjamé"),
    ("anyama", "Anyama"),
    ("bingerville", "Bingerville"),
)

MAX_RETURNED_IDS = 50


def map_google_types_to_category(types: Optional[Iterable[str]]) -> str:
    t = {x.lower() for x in (types or [])}
    if "lodging" in t:
        return "hotel"
    if "liquor_store" in t:
        return "cave"
    if t & {"pharmacy", "drugstore"}:
        return "pharmacy"
    if t & {"police", "police_station"}:
        return "police"
    if t & {"hospital", "doctor", "health"}:
        return "hospital"
    if t & {"fire_station", "ambulance"}:
        return "emergency"
    if "event_venue" in t:
        return "organizer"
    if t & {"restaurant", "meal_takeaway", "meal_delivery"}:
        return "restaurant"
    if "night_club" in t:
        return "lounge"
    if t & {"bar", "cafe"}:
        return "bar"
    return "other"


def infer_commune_from_address(address: Optional[str]) -> Optional[str]:
    """Best-effort Abidjan commune from a free-text address."""
    a = (address or "").lower()
    if not a:
        return None
    for needle, label in COMMUNE_RULES:
        if needle in a:
            return label
    return None


class PlacesImportService:
    """Upserts Google Nearby Search results as published venues"""

    def __init__(self, client: GooglePlacesClient, max_photos: int = 3):
        self.client = client
        self.max_photos = max_photos

    async def import_nearby(self, db: AsyncSession, request: ImportNearbyRequest) -> ImportNearbyResponse:
        """
        Import every result for each requested type.

        Raises:
            InvalidQueryError: a type outside ALLOWED_GOOGLE_TYPES
            ProviderError: the first page of a type was rejected
            StorageUnavailableError: the upsert failed
        """
        unknown = [t for t in request.types if t not in ALLOWED_GOOGLE_TYPES]
        if unknown:
            raise InvalidQueryError(
                f"Unknown Google type(s): {', '.join(unknown)}. Allowed types: {', '.join(ALLOWED_GOOGLE_TYPES)}",
                details={"unknown": unknown, "allowed": list(ALLOWED_GOOGLE_TYPES)},
            )

        repo = EstablishmentRepository(db)
        ids: List[str] = []
        scanned = 0

        try:
            for place_type in request.types:
                results = await self.client.nearby_all(
                    request.lat, request.lng, request.radius_meters, place_type
                )
                for place in results:
                    fields = self.place_fields(place)
                    if fields is None:
                        continue
                    scanned += 1
                    ids.append(
                        await repo.upsert_provider_place(PROVIDER_NAME, place["place_id"], fields)
                    )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Places import upsert failed: {e}")
            raise StorageUnavailableError("places_import") from e

        logger.info(f"Places import scanned={scanned} upserted={len(ids)} types={request.types}")
        return ImportNearbyResponse(
            ok=True, scanned=scanned, upserted=len(ids), ids=ids[:MAX_RETURNED_IDS]
        )

    def place_fields(self, place: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Column values for one search result, or None when it has no id or location."""
        location = (place.get("geometry") or {}).get("location")
        if not place.get("place_id") or not location:
            return None

        address = place.get("vicinity") or None
        return {
            "name": place.get("name") or place["place_id"],
            "category": map_google_types_to_category(place.get("types")),
            "address": address,
            "commune": infer_commune_from_address(address),
            "photos": self.photo_urls(place) or None,
            "lat": float(location["lat"]),
            "lng": float(location["lng"]),
            "published": True,
        }

    def photo_urls(self, place: Dict[str, Any]) -> List[str]:
        refs = [
            str((p or {}).get("photo_reference") or "")
            for p in (place.get("photos") or [])
        ]
        urls = [self.client.photo_url(ref) for ref in refs if ref][: self.max_photos]
        return [u for u in urls if u]
