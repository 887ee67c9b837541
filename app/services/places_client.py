"""
Google Places (legacy Nearby Search) client used by the admin import.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from app.config.settings import PlacesSettings, get_settings
from app.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

ACCEPTED_STATUSES = {"OK", "ZERO_RESULTS"}
PROVIDER_NAME = "google"


class GooglePlacesClient:
    """Nearby Search with next_page_token paging"""

    def __init__(
        self,
        settings: Optional[PlacesSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings().places
        self.api_key = (self.settings.api_key or "").strip()
        self.base_url = self.settings.base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        self._owns_client = http_client is None
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def photo_url(self, photo_reference: str, max_width: int = 1200) -> Optional[str]:
        if not self.api_key or not photo_reference:
            return None
        query = urlencode(
            {"maxwidth": max_width, "photo_reference": photo_reference, "key": self.api_key}
        )
        return f"{self.base_url}/photo?{query}"

    async def nearby(self, lat: float, lng: float, radius_m: int, place_type: str) -> Dict[str, Any]:
        """
        First page of Nearby Search results.

        Raises:
            ProviderError: missing key, transport failure or a rejected status
        """
        self._require_key()
        data = await self._get(
            {
                "location": f"{lat},{lng}",
                "radius": str(radius_m),
                "type": place_type,
                "key": self.api_key,
            }
        )
        if data is None:
            raise ProviderError(PROVIDER_NAME, "Nearby Search request failed")
        status = data.get("status")
        if status and status not in ACCEPTED_STATUSES:
            raise ProviderError(
                PROVIDER_NAME,
                data.get("error_message") or f"Google Places error: {status}",
                details={"provider": PROVIDER_NAME, "status": status},
            )
        return data

    async def nearby_all(self, lat: float, lng: float, radius_m: int, place_type: str) -> List[Dict[str, Any]]:
        """First page plus up to ``max_extra_pages`` follow-up pages."""
        first = await self.nearby(lat, lng, radius_m, place_type)
        results: List[Dict[str, Any]] = list(first.get("results") or [])

        token = first.get("next_page_token")
        for _ in range(self.settings.max_extra_pages):
            if not token:
                break
            # Page tokens only become valid after a short delay
            await self._sleep(self.settings.page_delay_seconds)
            page = await self._get({"pagetoken": token, "key": self.api_key})
            if page is None or (page.get("status") and page["status"] not in ACCEPTED_STATUSES):
                logger.info(f"Stopping Places paging for type={place_type}: {page and page.get('status')}")
                break
            results.extend(page.get("results") or [])
            token = page.get("next_page_token")

        logger.info(f"Places nearby type={place_type} returned {len(results)} results")
        return results

    async def _get(self, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
        try:
            response = await self._client.get(
                f"{self.base_url}/nearbysearch/json",
                params=params,
                timeout=self.settings.timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.error(f"Places request failed: {type(e).__name__}: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"Places API returned {response.status_code}: {response.text[:180]}")
            return None
        try:
            return response.json()
        except ValueError:
            logger.error("Places API returned invalid JSON")
            return None

    def _require_key(self) -> None:
        if not self.api_key:
            raise ProviderError(
                PROVIDER_NAME,
                "PLACES_API_KEY not configured",
                details={"provider": PROVIDER_NAME, "configured": False},
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
