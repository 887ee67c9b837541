"""
Directions client - fetches routes from the Mapbox Directions v5 API.

Every expected failure (HTTP error, non-"Ok" provider code, empty route list,
timeout, transport error) is returned as ``RouteNotFound`` rather than raised,
so callers can cache "no route" like any other outcome.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.config.settings import DirectionsSettings, get_settings
from app.schemas.route import (
    LngLat,
    Maneuver,
    Route,
    RouteFound,
    RouteLookup,
    RouteNotFound,
    RouteStep,
    TravelMode,
)

logger = logging.getLogger(__name__)

ERROR_BODY_PREVIEW_CHARS = 180


class DirectionsClient:
    """Client for a Mapbox-compatible directions provider."""

    def __init__(
        self,
        settings: Optional[DirectionsSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings().directions
        self.base_url = self.settings.base_url.rstrip("/")
        self.access_token = (self.settings.access_token or "").strip()
        self._client = http_client or httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        self._owns_client = http_client is None

        if not self.access_token:
            logger.warning(
                "Directions access token not configured. "
                "Set DIRECTIONS_ACCESS_TOKEN in .env file."
            )

    def build_url(self, origin: LngLat, destination: LngLat, mode: TravelMode) -> str:
        return (
            f"{self.base_url}/directions/v5/mapbox/{TravelMode(mode).value}/"
            f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        )

    def build_params(self) -> Dict[str, str]:
        return {
            "access_token": self.access_token,
            "geometries": "geojson",
            "steps": "true",
            "banner_instructions": "true",
            "language": self.settings.language,
        }

    async def fetch_route(
        self,
        origin: LngLat,
        destination: LngLat,
        mode: TravelMode = TravelMode.DRIVING,
    ) -> RouteLookup:
        """
        Fetch the best route between two points.

        Args:
            origin: Start point (longitude first)
            destination: End point (longitude first)
            mode: driving, walking or cycling

        Returns:
            RouteFound with the first provider route, or RouteNotFound
        """
        if not self.access_token:
            logger.warning("Directions requested without an access token")
            return RouteNotFound("missing_token")

        url = self.build_url(origin, destination, mode)

        try:
            response = await self._client.get(
                url,
                params=self.build_params(),
                timeout=self.settings.timeout_seconds,
            )
        except httpx.TimeoutException:
            logger.warning(f"Timeout fetching {mode} route {origin.lng},{origin.lat} -> {destination.lng},{destination.lat}")
            return RouteNotFound("timeout")
        except httpx.HTTPError as e:
            logger.error(f"Directions request failed: {type(e).__name__}: {e}")
            return RouteNotFound("transport_error")

        if response.status_code != 200:
            logger.warning(
                f"Directions provider returned {response.status_code}: "
                f"{response.text[:ERROR_BODY_PREVIEW_CHARS] or 'request failed'}"
            )
            return RouteNotFound(f"http_{response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            logger.error(f"Directions provider returned invalid JSON: {response.text[:ERROR_BODY_PREVIEW_CHARS]}")
            return RouteNotFound("invalid_payload")

        return self.parse_route(payload)

    @classmethod
    def parse_route(cls, payload: Any) -> RouteLookup:
        """Extract the first route from a Directions v5 response body."""
        if not isinstance(payload, dict):
            return RouteNotFound("invalid_payload")

        code = payload.get("code")
        if code and code != "Ok":
            logger.info(f"Directions provider: {code} {payload.get('message') or ''}".strip())
            return RouteNotFound(f"provider_{code}")

        routes = payload.get("routes") or []
        if not routes:
            logger.info("Directions provider returned no routes")
            return RouteNotFound("no_route")

        best = routes[0] or {}
        coordinates = ((best.get("geometry") or {}).get("coordinates")) or []

        try:
            route = Route(
                distance_meters=float(best.get("distance") or 0),
                duration_seconds=float(best.get("duration") or 0),
                geometry=[(float(c[0]), float(c[1])) for c in coordinates],
                steps=cls._parse_steps(best.get("legs") or []),
            )
        except (ValidationError, TypeError, IndexError, ValueError) as e:
            logger.warning(f"Directions route rejected: {e}")
            return RouteNotFound("no_geometry")

        return RouteFound(route)

    @staticmethod
    def _parse_steps(legs: List[Dict[str, Any]]) -> List[RouteStep]:
        steps: List[RouteStep] = []
        for leg in legs:
            for s in (leg or {}).get("steps") or []:
                m = s.get("maneuver") or {}
                location = m.get("location")
                steps.append(
                    RouteStep(
                        distance_meters=float(s.get("distance") or 0),
                        duration_seconds=float(s.get("duration") or 0),
                        instruction=str(m.get("instruction") or ""),
                        name=str(s["name"]) if s.get("name") else None,
                        maneuver=Maneuver(
                            location=(float(location[0]), float(location[1])) if location else None,
                            type=str(m.get("type") or ""),
                            modifier=str(m["modifier"]) if m.get("modifier") else None,
                            bearing_before=m.get("bearing_before") if isinstance(m.get("bearing_before"), (int, float)) else None,
                            bearing_after=m.get("bearing_after") if isinstance(m.get("bearing_after"), (int, float)) else None,
                        ),
                    )
                )
        return steps

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
