"""
Route cache - memoizes directions lookups and coalesces concurrent requests.

Keys are ``mode:lng,lat->lng,lat`` with coordinates rounded to 4 decimals
(about 11 m), so nearby repeats of the same trip share one provider call.
"No route" outcomes are cached too, as ``RouteNotFound``.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional

from app.config.settings import DirectionsSettings, get_settings
from app.core import metrics_proximity
from app.core.cache_client import TTLCache
from app.core.geo import quantize
from app.schemas.route import LngLat, Route, RouteLookup, RouteNotFound, TravelMode
from app.services.directions_client import DirectionsClient

logger = logging.getLogger(__name__)


def _fmt(value: float) -> str:
    return f"{quantize(value):.4f}"


def route_key(origin: LngLat, destination: LngLat, mode: TravelMode) -> str:
    return (
        f"{TravelMode(mode).value}:"
        f"{_fmt(origin.lng)},{_fmt(origin.lat)}->{_fmt(destination.lng)},{_fmt(destination.lat)}"
    )


class RouteCache:
    """
    TTL cache plus in-flight request deduplication in front of a DirectionsClient.

    All callers asking for the same key while a lookup is outstanding await the
    same future; the provider is called once. The in-flight map is only touched
    from the event loop thread, and no await sits between the lookup and the
    registration, so check-then-register is atomic.
    """

    def __init__(
        self,
        client: DirectionsClient,
        settings: Optional[DirectionsSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.client = client
        self.settings = settings or get_settings().directions
        cache_kwargs = {"clock": clock} if clock is not None else {}
        self.cache: TTLCache[RouteLookup] = TTLCache(
            ttl_seconds=self.settings.route_ttl_seconds,
            max_entries=self.settings.cache_max_entries,
            name="routes",
            **cache_kwargs,
        )
        self._inflight: Dict[str, "asyncio.Future[RouteLookup]"] = {}

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    async def get_route(
        self,
        origin: LngLat,
        destination: LngLat,
        mode: TravelMode = TravelMode.DRIVING,
    ) -> RouteLookup:
        """
        Cached route between two points.

        Returns:
            RouteFound or RouteNotFound; provider failures never raise
        """
        key = route_key(origin, destination, mode)

        found, cached = self.cache.lookup(key)
        if found:
            metrics_proximity.increment("route_cache_hits")
            return cached
        metrics_proximity.increment("route_cache_misses")

        pending = self._inflight.get(key)
        if pending is not None:
            metrics_proximity.increment("route_inflight_joins")
            logger.debug(f"Joining in-flight route lookup: {key}")
            # A cancelled waiter must not cancel the shared lookup
            return await asyncio.shield(pending)

        future: "asyncio.Future[RouteLookup]" = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await self._fetch(key, origin, destination, mode)
            self.cache.set(key, result)
            future.set_result(result)
            return result
        except asyncio.CancelledError:
            # Nothing is cached; joined callers get an uncached miss
            if not future.done():
                future.set_result(RouteNotFound("cancelled"))
            raise
        finally:
            self._inflight.pop(key, None)

    async def get_route_or_none(
        self,
        origin: LngLat,
        destination: LngLat,
        mode: TravelMode = TravelMode.DRIVING,
    ) -> Optional[Route]:
        result = await self.get_route(origin, destination, mode)
        return result.route if result.found else None

    def clear(self) -> None:
        self.cache.clear()

    async def _fetch(
        self,
        key: str,
        origin: LngLat,
        destination: LngLat,
        mode: TravelMode,
    ) -> RouteLookup:
        metrics_proximity.increment("route_provider_calls")
        with metrics_proximity.record_route_latency():
            try:
                result = await self.client.fetch_route(origin, destination, mode)
            except Exception as e:
                logger.exception(f"Unexpected directions failure for {key}: {e}")
                result = RouteNotFound("unexpected_error")

        if not result.found:
            metrics_proximity.increment("route_not_found")
            logger.info(f"No route for {key}: {result.reason}")
        return result
