"""Navigation endpoints: cached routes and turn-by-turn progress."""
from fastapi import APIRouter, Depends, Query

from app.config.settings import get_settings
from app.core.dependencies import get_route_cache
from app.schemas.route import (
    FormattedRoute,
    LngLat,
    ProgressRequest,
    ProgressSnapshot,
    RouteResponse,
    TravelMode,
)
from app.services.formatting import format_distance, format_duration
from app.services.navigation_tracker import NavigationTracker
from app.services.route_cache import RouteCache

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("/route", response_model=RouteResponse, response_model_exclude_none=True)
async def get_route(
    origin_lng: float = Query(..., alias="originLng", ge=-180, le=180),
    origin_lat: float = Query(..., alias="originLat", ge=-90, le=90),
    dest_lng: float = Query(..., alias="destLng", ge=-180, le=180),
    dest_lat: float = Query(..., alias="destLat", ge=-90, le=90),
    mode: TravelMode = Query(TravelMode.DRIVING),
    routes: RouteCache = Depends(get_route_cache),
):
    """
    Route between two points

    "No route" is a normal answer (status "not_found"), not an error.
    """
    result = await routes.get_route(
        LngLat(lng=origin_lng, lat=origin_lat),
        LngLat(lng=dest_lng, lat=dest_lat),
        mode,
    )
    if not result.found:
        return RouteResponse(status="not_found", reason=result.reason)

    route = result.route
    return RouteResponse(
        status="ok",
        route=route,
        formatted=FormattedRoute(
            distance=format_distance(route.distance_meters),
            duration=format_duration(route.duration_seconds),
        ),
    )


@router.post("/progress", response_model=ProgressSnapshot)
async def evaluate_progress(request: ProgressRequest):
    """
    Evaluate one position update against a route

    The client sends back the step index it holds; the response carries the
    next index (at most one step further) and what to display.
    """
    tracker = NavigationTracker(
        route=request.route,
        advance_threshold_m=get_settings().navigation.advance_threshold_m,
        active=request.active,
    )
    tracker.restore(request.step_index)
    advanced = tracker.advance(request.position)
    return tracker.snapshot(advanced=advanced)
