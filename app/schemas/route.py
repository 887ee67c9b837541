"""Route, step and navigation progress schemas."""
import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


class TravelMode(str, Enum):
    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"


class LngLat(CamelModel):
    """Provider-ordered point (longitude first)."""
    lng: float = Field(ge=-180.0, le=180.0)
    lat: float = Field(ge=-90.0, le=90.0)

    @field_validator('lat', 'lng')
    @classmethod
    def finite_coordinate(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("coordinate must be finite")
        return v


class Maneuver(CamelModel):
    location: Optional[tuple[float, float]] = None  # [lng, lat]
    type: str = ""
    modifier: Optional[str] = None
    bearing_before: Optional[float] = None
    bearing_after: Optional[float] = None


class RouteStep(CamelModel):
    distance_meters: float = 0.0
    duration_seconds: float = 0.0
    instruction: str = ""
    name: Optional[str] = None
    maneuver: Maneuver


class Route(CamelModel):
    distance_meters: float
    duration_seconds: float
    geometry: list[tuple[float, float]]  # [[lng, lat], ...] start -> end
    steps: list[RouteStep] = Field(default_factory=list)

    @field_validator('geometry')
    @classmethod
    def at_least_two_points(cls, v):
        if len(v) < 2:
            raise ValueError("route geometry needs at least 2 points")
        return v

    @property
    def signature(self) -> tuple[float, float]:
        """Routes carry no id; (distance, duration) identifies a replacement."""
        return (self.distance_meters, self.duration_seconds)


@dataclass(frozen=True)
class RouteFound:
    route: Route
    found: ClassVar[bool] = True


@dataclass(frozen=True)
class RouteNotFound:
    reason: str
    found: ClassVar[bool] = False


RouteLookup = Union[RouteFound, RouteNotFound]


class FormattedRoute(CamelModel):
    distance: str
    duration: str


class RouteResponse(CamelModel):
    status: str
    route: Optional[Route] = None
    formatted: Optional[FormattedRoute] = None
    reason: Optional[str] = None


class Position(CamelModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class ProgressRequest(CamelModel):
    route: Route
    step_index: int = Field(default=0, ge=0)
    position: Position
    active: bool = True


class ProgressSnapshot(CamelModel):
    active: bool
    step_index: int
    step_count: int
    advanced: bool = False
    current_step: Optional[RouteStep] = None
    distance_to_next_maneuver: Optional[float] = None
    remaining_distance: Optional[float] = None
    remaining_duration: Optional[float] = None
    formatted_distance_to_next: Optional[str] = None
    formatted_remaining: Optional[FormattedRoute] = None
